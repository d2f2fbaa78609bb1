"""initial schema

Revision ID: 0001
Revises:
Create Date: 2025-01-17 15:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "autores",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nombre", sa.String(length=100), nullable=False, unique=True),
        sa.Column("biografia", sa.Text(), nullable=True),
        sa.Column("fecha_creacion", sa.DateTime(), nullable=True),
        sa.Column("fecha_actualizacion", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_autores_id", "autores", ["id"])

    op.create_table(
        "categorias",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nombre", sa.String(length=50), nullable=False, unique=True),
        sa.Column("icono", sa.String(length=50), nullable=True),
        sa.Column("color", sa.String(length=20), nullable=True),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column("fecha_creacion", sa.DateTime(), nullable=True),
        sa.Column("fecha_actualizacion", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_categorias_id", "categorias", ["id"])

    op.create_table(
        "etiquetas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("nombre", sa.String(length=50), nullable=False, unique=True),
        sa.Column("fecha_creacion", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_etiquetas_id", "etiquetas", ["id"])

    op.create_table(
        "poemas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("titulo", sa.String(length=200), nullable=False),
        sa.Column("autor_id", sa.Integer(), sa.ForeignKey("autores.id"), nullable=False),
        sa.Column("categoria_id", sa.Integer(), sa.ForeignKey("categorias.id"), nullable=False),
        sa.Column("icono", sa.String(length=50), nullable=True),
        sa.Column("extracto", sa.Text(), nullable=True),
        sa.Column("contenido", sa.Text(), nullable=False),
        sa.Column("tiempo_lectura", sa.Integer(), nullable=True),
        sa.Column("fecha_creacion", sa.DateTime(), nullable=True),
        sa.Column("fecha_actualizacion", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_poemas_id", "poemas", ["id"])
    op.create_index("ix_poemas_autor_id", "poemas", ["autor_id"])
    op.create_index("ix_poemas_categoria_id", "poemas", ["categoria_id"])
    op.create_index("ix_poemas_fecha_creacion", "poemas", ["fecha_creacion"])

    # Без ON DELETE CASCADE: удаление блокируется проверкой в API
    op.create_table(
        "poema_etiquetas",
        sa.Column("poema_id", sa.Integer(), sa.ForeignKey("poemas.id"), primary_key=True),
        sa.Column("etiqueta_id", sa.Integer(), sa.ForeignKey("etiquetas.id"), primary_key=True),
    )


def downgrade() -> None:
    op.drop_table("poema_etiquetas")
    op.drop_index("ix_poemas_fecha_creacion", table_name="poemas")
    op.drop_index("ix_poemas_categoria_id", table_name="poemas")
    op.drop_index("ix_poemas_autor_id", table_name="poemas")
    op.drop_index("ix_poemas_id", table_name="poemas")
    op.drop_table("poemas")
    op.drop_index("ix_etiquetas_id", table_name="etiquetas")
    op.drop_table("etiquetas")
    op.drop_index("ix_categorias_id", table_name="categorias")
    op.drop_table("categorias")
    op.drop_index("ix_autores_id", table_name="autores")
    op.drop_table("autores")
