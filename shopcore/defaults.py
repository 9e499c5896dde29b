from typing import List

from .models import Item

PLACEHOLDER_IMAGE = "/placeholder.svg?height=300&width=400"

# (id, name, brand, price, processor, memory, storage, screen, condition, rating, reviews, in_stock)
_DEFAULT_ROWS = [
    ("1", 'MacBook Pro 16"', "Apple", 2499, "M2 Pro", "16GB", "512GB SSD", '16.2" Retina', "new", 4.8, 124, True),
    ("2", "ThinkPad X1 Carbon", "Lenovo", 1899, "Intel i7-12th Gen", "16GB", "1TB SSD", '14" WQHD', "new", 4.6, 89, True),
    ("3", "XPS 13", "Dell", 1299, "Intel i5-12th Gen", "8GB", "256GB SSD", '13.4" FHD+', "new", 4.4, 67, True),
    ("4", "Surface Laptop 5", "Microsoft", 1599, "Intel i7-12th Gen", "16GB", "512GB SSD", '13.5" PixelSense', "new", 4.5, 45, True),
    ("5", "MacBook Air M2", "Apple", 1199, "M2", "8GB", "256GB SSD", '13.6" Liquid Retina', "refurbished", 4.7, 156, True),
    ("6", "ROG Zephyrus G14", "ASUS", 1799, "AMD Ryzen 9", "32GB", "1TB SSD", '14" QHD', "new", 4.6, 78, False),
    ("7", "Pavilion 15", "HP", 899, "Intel i5-11th Gen", "8GB", "512GB SSD", '15.6" FHD', "used", 4.2, 34, True),
    ("8", "Legion 5 Pro", "Lenovo", 1699, "AMD Ryzen 7", "16GB", "512GB SSD", '16" WQXGA', "new", 4.5, 92, True),
]


def default_catalog() -> List[Item]:
    """Fresh Item objects for the seed catalog; callers may mutate them."""
    return [
        Item(
            id=row[0],
            name=row[1],
            brand=row[2],
            price=float(row[3]),
            processor=row[4],
            memory_size=row[5],
            storage_size=row[6],
            screen_spec=row[7],
            condition=row[8],
            image_ref=PLACEHOLDER_IMAGE,
            rating=row[9],
            review_count=row[10],
            in_stock=row[11],
        )
        for row in _DEFAULT_ROWS
    ]
