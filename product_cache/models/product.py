from dataclasses import asdict, dataclass, field


@dataclass
class Product:
    """A product record.

    Equality compares name and price only. The id is left out because it
    is 0 until the store assigns one on creation, so a product compares
    equal to its persisted copy.
    """
    name: str
    price: float
    id: int = field(default=0, compare=False)

    @classmethod
    def from_row(cls, row):
        """Build a product from a sqlite3.Row with id, name and price columns"""
        return cls(id=row['id'], name=row['name'], price=row['price'])

    def to_dict(self):
        return asdict(self)
