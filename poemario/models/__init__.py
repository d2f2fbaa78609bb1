from poemario.models.author import Author
from poemario.models.category import Category
from poemario.models.tag import Tag, poem_tags
from poemario.models.poem import Poem
