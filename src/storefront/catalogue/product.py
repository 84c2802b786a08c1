"""Product aggregate with the Rating value object."""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront

MIN_RATING = 1
MAX_RATING = 5


class Category(Enum):
    SOFTWARE_AND_APPS = "software & apps"
    MS_OFFICE_KEYS = "MS office keys"
    WINDOWS_KEYS = "Windows Keys"
    PC_GAMES = "PC games"
    CRACKED = "Cracked"


class License(Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    ENTERPRISE = "enterprise"


# Fields stored as JSON text and the Python type they decode to
_JSON_FIELDS = {
    "images": list,
    "tags": list,
    "features": list,
    "system_requirements": dict,
}

# Fields an admin may change through update()
_EDITABLE_FIELDS = (
    "name",
    "description",
    "price",
    "category",
    "images",
    "download_url",
    "system_requirements",
    "version",
    "license",
    "tags",
    "features",
    "is_active",
)


def _encode(field, value):
    if value is None:
        return None
    expected = _JSON_FIELDS[field]
    if not isinstance(value, expected):
        raise ValidationError({field: [f"{field} must be a {expected.__name__}"]})
    return json.dumps(value)


@storefront.value_object(part_of="Product")
class Rating:
    """Running average of shopper ratings and the number of ratings seen."""

    average: Float(default=0.0, min_value=0.0, max_value=5.0)
    count: Integer(default=0, min_value=0)

    def record(self, value):
        """Return a new Rating with ``value`` folded into the average."""
        previous_count = self.count or 0
        previous_average = self.average or 0.0
        new_count = previous_count + 1
        new_average = (previous_average * previous_count + value) / new_count
        return Rating(average=new_average, count=new_count)


@storefront.aggregate
class Product:
    """A catalogue entry: a downloadable software product with a price."""

    name: String(required=True, max_length=100, sanitize=False)
    description: String(required=True, max_length=1000, sanitize=False)
    price: Float(required=True, min_value=0.0)
    category: String(required=True, choices=Category, sanitize=False)
    images: Text(sanitize=False)  # JSON: [{"url": ..., "alt": ...}]
    download_url: String(required=True, max_length=1000, sanitize=False)
    system_requirements: Text(sanitize=False)  # JSON: {"os": [...], "processor": ..., "memory": ..., "storage": ...}
    version: String(max_length=30, default="1.0.0", sanitize=False)
    license: String(choices=License, default=License.SINGLE.value, sanitize=False)
    tags: Text(sanitize=False)  # JSON list
    features: Text(sanitize=False)  # JSON list
    is_active: Boolean(default=True)
    downloads: Integer(default=0)
    rating: ValueObject(Rating)
    created_by: Identifier(required=True)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(
        cls,
        name,
        description,
        price,
        category,
        download_url,
        created_by,
        images=None,
        system_requirements=None,
        version=None,
        license=None,
        tags=None,
        features=None,
        is_active=True,
    ):
        from storefront.catalogue.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            name=name.strip() if isinstance(name, str) else name,
            description=description,
            price=price,
            category=category,
            download_url=download_url,
            created_by=created_by,
            images=_encode("images", images or []),
            system_requirements=_encode("system_requirements", system_requirements or {}),
            version=version or "1.0.0",
            license=license or License.SINGLE.value,
            tags=_encode("tags", tags or []),
            features=_encode("features", features or []),
            is_active=True if is_active is None else is_active,
            rating=Rating(average=0.0, count=0),
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                category=product.category,
                price=product.price,
                created_by=created_by,
                created_at=now,
            )
        )
        return product

    def decoded(self, field):
        """Return a JSON-backed field as its Python value."""
        raw = getattr(self, field)
        if not raw:
            return _JSON_FIELDS[field]()
        return json.loads(raw)

    def update(self, **changes):
        from storefront.catalogue.events import ProductUpdated

        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        changed = []
        for field, value in changes.items():
            if value is None:
                continue
            if field in _JSON_FIELDS:
                value = _encode(field, value)
            setattr(self, field, value)
            changed.append(field)

        if not changed:
            return

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ProductUpdated(
                product_id=self.id,
                changed_fields=",".join(changed),
                updated_at=now,
            )
        )

    def rate(self, value):
        """Fold a shopper rating into the running average.

        Read-modify-write on a single document: concurrent ratings may lose
        an update, which only costs precision.
        """
        from storefront.catalogue.events import ProductRated

        if value is None or isinstance(value, bool) or not MIN_RATING <= value <= MAX_RATING:
            raise ValidationError({"rating": [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})
        if not self.is_active:
            raise ValidationError({"product": ["Product is not available"]})

        self.rating = (self.rating or Rating()).record(value)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductRated(
                product_id=self.id,
                rating=value,
                new_average=self.rating.average,
                new_count=self.rating.count,
            )
        )

    def matches(self, keyword):
        """Case-insensitive substring match over name, description and tags."""
        needle = keyword.lower()
        haystack = [self.name or "", self.description or "", *self.decoded("tags")]
        return any(needle in str(text).lower() for text in haystack)
