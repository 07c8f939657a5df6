#!/usr/bin/env python
from sdk.storeclient import StoreClient
from storefront.config import settings
from storefront.errors import NotFound


def main():
    c = StoreClient(base_url=settings.api_base_url)

    # -----------------------------
    # List products (remote + local)
    # -----------------------------
    print("Listing products...")
    before = c.list_products()
    print(f"{len(before)} products, {sum(p['isLocal'] for p in before)} local")

    # -----------------------------
    # Create a local product
    # -----------------------------
    print("\nCreating a local product...")
    mug = c.create_product("Mug", 9.99, "http://x/y.png", "kitchen")
    print(mug)

    # -----------------------------
    # Detail view
    # -----------------------------
    print("\nProduct detail...")
    print(c.get_product_detail(mug["id"]))

    # -----------------------------
    # Update it
    # -----------------------------
    print("\nRenaming it...")
    print(c.update_product(mug["id"], "Big Mug", 12.5, mug["imageUrl"], mug["category"]))

    # -----------------------------
    # Delete it, twice
    # -----------------------------
    print("\nDeleting it...")
    print(c.delete_product(mug["id"]))
    try:
        c.delete_product(mug["id"])
    except NotFound as e:
        print(f"second delete: {e}")

    after = c.list_products()
    print(f"\nBack to {len(after)} products")


if __name__ == "__main__":
    main()
