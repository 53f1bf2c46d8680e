"""Example usage of the datadiff library."""

import json

from datadiff import (
    Differ,
    DiffKind,
    Session,
    SourceLabels,
    TableRenderer,
    classify,
    render,
)
from datadiff.masker import Masker

# Old API response (legacy system)
old_response = {
    "id": "INV-001",
    "total": 100.00,
    "status": "PAID",
    "updatedAt": "2025-02-02T11:00:00Z",  # Will be excluded
    "customer": {"name": "Acme", "vatId": "DE123"},
    "tags": ["urgent", "export"],
    "lineItems": [
        {"sku": "WIDGET-001", "quantity": 5},
        {"sku": "GADGET-002", "quantity": 2}
    ]
}

# New API response (new system)
new_response = {
    "id": "INV-001",
    "total": "100.00",  # Now a string
    "status": "paid",
    "updatedAt": "2025-02-02T11:00:07Z",
    "customer": {"name": "Acme", "email": "billing@acme.test"},
    "tags": ["export", "urgent"],  # Same tags, different order
    "lineItems": [
        {"sku": "WIDGET-001", "quantity": 5},
        {"sku": "GADGET-002", "quantity": 3}
    ]
}

ALL_KINDS = frozenset(DiffKind)


def compare(order_sensitive):
    masker = Masker(["$.updatedAt"])
    left, right = masker.mask(old_response, new_response)

    raw = Differ().compare(left, right, ALL_KINDS)
    records = classify(raw, order_sensitive, ALL_KINDS)

    return Session(
        requested_kinds=ALL_KINDS,
        order_sensitive=order_sensitive,
        records=records,
        sources=SourceLabels(left="old.json", right="new.json"),
        excluded_paths=masker.expressions,
    )


def main():
    print("=" * 60)
    print("datadiff - Example")
    print("=" * 60)

    session = compare(order_sensitive=False)
    print(render(session, TableRenderer(width=100)))

    print("-" * 60)
    print("Saved session:")
    print(json.dumps(session.to_dict(), indent=2))


def example_with_array_order():
    """Example where array positions matter."""
    print("\n" + "=" * 60)
    print("Example with Array Order")
    print("=" * 60)

    session = compare(order_sensitive=True)
    for record in session.records:
        print(f"  - [{record.kind.value}] {record.path}")


if __name__ == "__main__":
    main()
    example_with_array_order()
