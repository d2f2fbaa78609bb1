"""Демонстрационные данные каталога, загружаемые в пустую базу."""
from sqlalchemy import select, func, insert
from sqlalchemy.ext.asyncio import AsyncSession

from poemario.logs import debug_logger
from poemario.models import Author, Category, Tag, Poem, poem_tags


SAMPLE_AUTHORS = [
    {"nombre": "Gabriel García Márquez", "biografia": "Escritor colombiano, premio Nobel de Literatura 1982."},
    {"nombre": "Pablo Neruda", "biografia": "Poeta chileno, premio Nobel de Literatura 1971."},
    {"nombre": "Mario Benedetti", "biografia": "Escritor uruguayo, conocido por sus poemas y novelas."},
    {"nombre": "Octavio Paz", "biografia": "Poeta mexicano, premio Nobel de Literatura 1990."},
    {"nombre": "Federico García Lorca", "biografia": "Poeta español, figura clave de la Generación del 27."},
]

SAMPLE_CATEGORIES = [
    {"nombre": "Naturaleza", "icono": "🌿", "color": "#636B2F", "descripcion": "Poemas sobre la naturaleza y el medio ambiente"},
    {"nombre": "Amor", "icono": "💕", "color": "#E89EB8", "descripcion": "Poemas románticos y de amor"},
    {"nombre": "Reflexión", "icono": "🤔", "color": "#F4D03F", "descripcion": "Poemas filosóficos y de reflexión"},
    {"nombre": "Nostalgia", "icono": "🌅", "color": "#D67A9A", "descripcion": "Poemas nostálgicos y melancólicos"},
    {"nombre": "Libertad", "icono": "🕊️", "color": "#8B9A4A", "descripcion": "Poemas sobre libertad y justicia"},
]

SAMPLE_TAGS = [
    "Romántico", "Nostálgico", "Filosófico", "Naturaleza", "Libertad",
    "Melancolía", "Esperanza", "Tiempo", "Sueños", "Amistad",
]

SAMPLE_POEMS = [
    {
        "titulo": "El mar y la luna",
        "autor": "Gabriel García Márquez",
        "categoria": "Naturaleza",
        "icono": "🌊",
        "extracto": "El mar se extiende infinito bajo la luna plateada...",
        "contenido": (
            "El mar se extiende infinito\nbajo la luna plateada,\nondas que susurran secretos\n"
            "de historias no contadas.\n\nLa brisa acaricia mi rostro\ncomo un recuerdo perdido,\n"
            "entre las olas que danzan\nen este baile eterno y querido."
        ),
        "tiempo_lectura": 3,
        "etiquetas": ["Naturaleza", "Melancolía"],
    },
    {
        "titulo": "Tu nombre en mi corazón",
        "autor": "Pablo Neruda",
        "categoria": "Amor",
        "icono": "💖",
        "extracto": "Escribo tu nombre en mi corazón cada día...",
        "contenido": (
            "Escribo tu nombre en mi corazón cada día,\ncomo si fuera la primera vez,\n"
            "con letras de luz y melodía\nque iluminan mi alma sin cesar.\n\n"
            "Tu nombre es mi refugio seguro,\nmi estrella en la noche oscura,\n"
            "el verso más hermoso y puro\nque habita en mi literatura."
        ),
        "tiempo_lectura": 4,
        "etiquetas": ["Romántico", "Esperanza"],
    },
    {
        "titulo": "El tiempo que se escapa",
        "autor": "Mario Benedetti",
        "categoria": "Reflexión",
        "icono": "⏰",
        "extracto": "El tiempo se escapa entre mis dedos...",
        "contenido": (
            "El tiempo se escapa entre mis dedos\ncomo arena dorada al viento,\n"
            "segundos que se vuelven recuerdos\nen este viaje sin aliento.\n\n"
            "¿Qué es el tiempo sino un sueño?\nUn instante que se desvanece,\n"
            "un suspiro, un momento pequeño\nque la memoria agradece."
        ),
        "tiempo_lectura": 3,
        "etiquetas": ["Filosófico", "Tiempo"],
    },
]


async def seed_sample_data(db: AsyncSession) -> bool:
    """
    Загрузка демонстрационных данных.

    Returns:
        True, если данные были добавлены; False, если в базе уже есть авторы
    """
    existing = await db.scalar(select(func.count()).select_from(Author))
    if existing:
        debug_logger.debug(f"Пропуск загрузки демо-данных: уже есть {existing} авторов")
        return False

    authors = {item["nombre"]: Author(**item) for item in SAMPLE_AUTHORS}
    categories = {item["nombre"]: Category(**item) for item in SAMPLE_CATEGORIES}
    tags = {name: Tag(nombre=name) for name in SAMPLE_TAGS}
    # Порядок вставки задает идентификаторы 1..N
    for group in (authors, categories, tags):
        for entity in group.values():
            db.add(entity)
            await db.flush()

    for item in SAMPLE_POEMS:
        poem = Poem(
            titulo=item["titulo"],
            autor_id=authors[item["autor"]].id,
            categoria_id=categories[item["categoria"]].id,
            icono=item["icono"],
            extracto=item["extracto"],
            contenido=item["contenido"],
            tiempo_lectura=item["tiempo_lectura"],
        )
        db.add(poem)
        await db.flush()
        await db.execute(
            insert(poem_tags),
            [{"poema_id": poem.id, "etiqueta_id": tags[name].id} for name in item["etiquetas"]],
        )

    await db.commit()
    debug_logger.info(
        f"Загружены демо-данные: {len(authors)} авторов, {len(categories)} категорий, "
        f"{len(tags)} тегов, {len(SAMPLE_POEMS)} стихотворений"
    )
    return True
