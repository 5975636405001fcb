"""
Static reference data for price estimation.

One canonical table per concern: category price ranges, representative
product names, and the fallback alternatives shown when no comparable
listings could be gathered.
"""

from typing import Dict, List, NamedTuple


class PriceRange(NamedTuple):
    avg_price: float
    min_price: float
    max_price: float


CATEGORY_PRICE_RANGES: Dict[str, PriceRange] = {
    "smartphone": PriceRange(800, 600, 1200),
    "laptop": PriceRange(1500, 1200, 2500),
    "gaming": PriceRange(500, 450, 700),
    "camera": PriceRange(1200, 800, 2000),
    "audio": PriceRange(300, 200, 400),
    "electronics": PriceRange(500, 300, 700),
    "furniture": PriceRange(800, 400, 1500),
    "appliance": PriceRange(1000, 500, 2000),
    "jewelry": PriceRange(1500, 500, 5000),
    "clothing": PriceRange(100, 50, 200),
    "motorcycle": PriceRange(8000, 3000, 15000),
    "vehicle": PriceRange(25000, 15000, 40000),
    "real_estate": PriceRange(350000, 200000, 500000),
}


def price_range_for_category(category: str, price: float = 0) -> PriceRange:
    """Known categories use the table; anything else brackets the asking price."""
    known = CATEGORY_PRICE_RANGES.get(category)
    if known:
        return known
    return PriceRange(price * 1.2, price * 0.8, price * 1.5)


PRODUCT_NAMES: Dict[str, List[str]] = {
    "smartphone": ["iPhone 13 Pro", "Samsung Galaxy S22", "Google Pixel 6", "OnePlus 10 Pro"],
    "laptop": ["MacBook Pro M1", "Dell XPS 13", "HP Spectre x360", "Lenovo ThinkPad X1"],
    "gaming": ["PlayStation 5", "Xbox Series X", "Nintendo Switch OLED", "Steam Deck"],
    "camera": ["Sony Alpha a7 III", "Canon EOS R6", "Nikon Z6 II", "Fujifilm X-T4"],
    "audio": ["Bose QuietComfort 45", "Sony WH-1000XM4", "Apple AirPods Pro", "Sennheiser Momentum 3"],
    "furniture": ["Sectional Sofa", "Queen Bed Frame", "Dining Table Set", "Office Desk"],
    "appliance": ["Samsung Refrigerator", "LG Washing Machine", "KitchenAid Mixer", "Dyson Vacuum"],
    "jewelry": ["Diamond Necklace", "Gold Watch", "Silver Bracelet", "Pearl Earrings"],
    "clothing": ["Designer Jacket", "Premium Jeans", "Leather Boots", "Cashmere Sweater"],
    "motorcycle": ["Yamaha YZF-R6", "Honda CBR600RR", "Kawasaki Ninja 650", "Harley-Davidson Sportster"],
    "vehicle": ["Toyota Camry", "Honda Civic", "Ford F-150", "Chevrolet Silverado"],
    "electronics": ["Premium Electronics", "Smart Device", "Tech Gadget", "Digital Device"],
}


def product_names_for_category(category: str) -> List[str]:
    return PRODUCT_NAMES.get(category) or PRODUCT_NAMES["electronics"]


MOTORCYCLE_MODELS: Dict[str, List[str]] = {
    "Yamaha": ["YZF-R6", "YZF-R1", "MT-07", "MT-09", "Bolt", "V-Star", "FZ-07", "FZ-09", "Tenere 700"],
    "Honda": ["CBR600RR", "CBR1000RR", "Rebel 500", "Rebel 1100", "Gold Wing", "Africa Twin", "Shadow", "CB500F"],
    "Kawasaki": ["Ninja 400", "Ninja 650", "Ninja ZX-6R", "Ninja ZX-10R", "Z650", "Z900", "Vulcan", "Versys"],
    "Suzuki": ["GSX-R600", "GSX-R750", "GSX-R1000", "Boulevard", "V-Strom", "Hayabusa", "SV650", "Katana"],
    "Harley-Davidson": ["Sportster", "Street Glide", "Road Glide", "Fat Boy", "Softail", "Iron 883", "Road King"],
    "Ducati": ["Panigale V4", "Monster", "Multistrada", "Diavel", "Scrambler", "SuperSport", "Streetfighter"],
    "BMW": ["R 1250 GS", "S 1000 RR", "F 900 R", "R nineT", "K 1600", "G 310 R", "F 850 GS"],
    "Triumph": ["Street Triple", "Speed Triple", "Bonneville", "Tiger", "Rocket 3", "Trident", "Daytona"],
    "KTM": ["390 Duke", "790 Duke", "1290 Super Duke", "RC 390", "Adventure 1290", "690 Enduro"],
}

CAR_MODELS: Dict[str, List[str]] = {
    "Toyota": ["Camry", "Corolla", "RAV4", "Highlander", "Tacoma", "4Runner", "Prius", "Sienna"],
    "Honda": ["Civic", "Accord", "CR-V", "Pilot", "Odyssey", "HR-V", "Ridgeline", "Fit"],
    "Ford": ["F-150", "Escape", "Explorer", "Mustang", "Edge", "Bronco", "Ranger", "Expedition"],
    "Chevrolet": ["Silverado", "Equinox", "Tahoe", "Malibu", "Traverse", "Camaro", "Suburban", "Colorado"],
    "Nissan": ["Altima", "Rogue", "Sentra", "Pathfinder", "Murano", "Frontier", "Maxima", "Kicks"],
    "BMW": ["3 Series", "5 Series", "X3", "X5", "7 Series", "X1", "M3", "M5"],
    "Mercedes": ["C-Class", "E-Class", "GLC", "GLE", "S-Class", "A-Class", "GLA", "GLS"],
    "Audi": ["A4", "Q5", "A6", "Q7", "A3", "Q3", "e-tron", "A8"],
    "Lexus": ["RX", "ES", "NX", "IS", "GX", "UX", "LS", "LC"],
}

MOTORCYCLE_SOURCES = ["CycleTrader", "Motorcycle.com", "RevZilla", "Craigslist", "Facebook Marketplace"]
CAR_SOURCES = ["AutoTrader", "Cars.com", "CarGurus", "Craigslist", "Facebook Marketplace"]
PRIVATE_PARTY_SOURCES = {"Craigslist", "Facebook Marketplace"}
VEHICLE_CONDITIONS = ["Excellent", "Good", "Fair", "Like New"]

REAL_ESTATE_SOURCES = ["Zillow", "Redfin", "Trulia", "Realtor.com", "Century 21"]
PROPERTY_TYPES = ["House", "Condo", "Townhouse", "Apartment"]


# (title, price, url); prices are fixed reference points for each category
FALLBACK_ALTERNATIVES: Dict[str, List[tuple]] = {
    "smartphone": [
        ("iPhone 13 Pro - Certified Refurbished", 699, "https://www.amazon.com/dp/B09G9HD6PD"),
        ("Samsung Galaxy S22 - New", 749, "https://www.bestbuy.com/site/samsung-galaxy-s22"),
    ],
    "laptop": [
        ("MacBook Pro M1 - Apple Certified", 1299, "https://www.apple.com/shop/refurbished/mac/macbook-pro"),
        ("Dell XPS 13 - New", 1199, "https://www.dell.com/en-us/shop/dell-laptops/xps-13-laptop"),
    ],
    "gaming": [
        ("PlayStation 5 - New", 499, "https://direct.playstation.com/en-us/consoles/console/playstation5-console"),
        ("Xbox Series X - New", 499, "https://www.xbox.com/en-US/consoles/xbox-series-x"),
    ],
    "camera": [
        ("Sony Alpha a7 III - New", 1999, "https://www.bhphotovideo.com/c/product/1433231-REG"),
        ("Canon EOS R6 - New", 2299, "https://www.adorama.com/car6.html"),
    ],
    "audio": [
        ("Bose QuietComfort 45 - New", 329, "https://www.bose.com/en_us/products/headphones"),
        ("Sony WH-1000XM4 - New", 349, "https://electronics.sony.com/audio/headphones"),
    ],
    "furniture": [
        ("Modern Sofa - New", 899, "https://www.wayfair.com/"),
        ("Dining Table Set - New", 649, "https://www.ikea.com/"),
    ],
    "appliance": [
        ("Samsung Refrigerator - New", 1299, "https://www.homedepot.com/"),
        ("LG Washing Machine - New", 899, "https://www.bestbuy.com/"),
    ],
    "jewelry": [
        ("Diamond Necklace - New", 1499, "https://www.bluenile.com/"),
        ("Gold Watch - New", 899, "https://www.jared.com/"),
    ],
    "clothing": [
        ("Designer Jacket - New", 199, "https://www.nordstrom.com/"),
        ("Premium Jeans - New", 129, "https://www.macys.com/"),
    ],
}
