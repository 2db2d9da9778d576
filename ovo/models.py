from sqlalchemy import Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------
class Entry(Base):
    """
    One key/value pair of the ordered store.

    The primary key index on ``key`` uses SQLite's BINARY collation, so an
    ``ORDER BY key`` walk is a lexicographic scan of the keyspace and a
    ``GLOB`` with a literal prefix is answered from the index.
    """

    __tablename__ = "entries"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
