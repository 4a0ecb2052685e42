from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
import sqlmodel

revision: str = "5c0a1e2f3b4d"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "configs",
        sa.Column("links", sa.JSON(), nullable=True),
        sa.Column("permissions", sa.JSON(), nullable=True),
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "translations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("config_id", sa.Integer(), nullable=False),
        sa.Column(
            "language_code", sqlmodel.sql.sqltypes.AutoString(length=16), nullable=False
        ),
        sa.Column("title", sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column(
            "author", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False
        ),
        sa.Column(
            "description", sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=False
        ),
        sa.Column("keywords", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["config_id"], ["configs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "config_id", "language_code", name="unique_config_language"
        ),
    )
    op.create_index(
        op.f("ix_translations_config_id"), "translations", ["config_id"], unique=False
    )
    op.create_index(
        op.f("ix_translations_language_code"),
        "translations",
        ["language_code"],
        unique=False,
    )
    op.create_table(
        "domains",
        sa.Column(
            "domain", sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False
        ),
        sa.Column(
            "homepage", sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True
        ),
        sa.Column("config_id", sa.Integer(), nullable=False),
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["config_id"], ["configs.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_domains_domain"), "domains", ["domain"], unique=True)
    op.create_index(
        op.f("ix_domains_config_id"), "domains", ["config_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_domains_config_id"), table_name="domains")
    op.drop_index(op.f("ix_domains_domain"), table_name="domains")
    op.drop_table("domains")
    op.drop_index(op.f("ix_translations_language_code"), table_name="translations")
    op.drop_index(op.f("ix_translations_config_id"), table_name="translations")
    op.drop_table("translations")
    op.drop_table("configs")
