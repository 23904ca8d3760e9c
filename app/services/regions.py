"""Location classification for routing searches to an adapter bundle.

Everything here is static data plus pure functions: no network access.
Locations in India go to the regional bundle (job portals, business
directories, curated companies); everything else goes to the general one.
"""

import logging
import re

from app.models import Coordinates

logger = logging.getLogger(__name__)

REGION_INDIA = "india"
REGION_GLOBAL = "global"

INDIAN_CITIES = [
    # Tier 1
    "Mumbai", "Delhi", "New Delhi", "Bangalore", "Bengaluru", "Hyderabad", "Chennai",
    "Kolkata", "Pune", "Ahmedabad", "Surat", "Jaipur", "Lucknow", "Kanpur", "Nagpur",
    "Indore", "Thane",
    # Tier 2
    "Bhopal", "Visakhapatnam", "Pimpri", "Patna", "Vadodara", "Ghaziabad", "Ludhiana",
    "Agra", "Nashik", "Faridabad", "Meerut", "Rajkot", "Kalyan", "Vasai", "Varanasi",
    "Srinagar", "Aurangabad", "Dhanbad", "Amritsar", "Navi Mumbai", "Allahabad",
    "Prayagraj", "Ranchi", "Howrah", "Coimbatore", "Jabalpur", "Gwalior", "Vijayawada",
    "Jodhpur", "Madurai", "Raipur", "Kota", "Gurgaon", "Gurugram", "Noida", "Chandigarh",
    "Mysore", "Mysuru", "Mangalore", "Hubli", "Warangal", "Nizamabad", "Karimnagar",
    "Tiruchirappalli", "Durgapur", "Asansol", "Siliguri", "Udaipur", "Kolhapur",
    # Tech hubs
    "Electronic City", "Whitefield", "Koramangala", "HSR Layout", "Marathahalli",
    "Bandra Kurla Complex", "Powai", "Andheri", "Lower Parel", "Worli", "Cyber City",
    "Hinjewadi", "Magarpatta", "Kharadi", "HITEC City", "Madhapur", "Gachibowli",
    "Kondapur", "Sholinganallur", "Taramani", "Salt Lake", "Rajarhat",
]

INDIAN_STATES = [
    "Andhra Pradesh", "Arunachal Pradesh", "Assam", "Bihar", "Chhattisgarh", "Goa",
    "Gujarat", "Haryana", "Himachal Pradesh", "Jharkhand", "Karnataka", "Kerala",
    "Madhya Pradesh", "Maharashtra", "Manipur", "Meghalaya", "Mizoram", "Nagaland",
    "Odisha", "Punjab", "Rajasthan", "Sikkim", "Tamil Nadu", "Telangana", "Tripura",
    "Uttar Pradesh", "Uttarakhand", "West Bengal", "Puducherry",
    "Andaman and Nicobar Islands", "Jammu and Kashmir", "Ladakh",
]

COUNTRY_TERMS = ["india", "bharat", "bharath"]

# A trailing ", <country>" or ", <US state>" overrides a shared place name
# such as Salt Lake (City, UT) or Whitefield (NH)
FOREIGN_COUNTRY_TERMS = {
    "usa", "us", "united states", "united states of america", "america",
    "uk", "united kingdom", "england", "scotland", "ireland", "canada", "mexico",
    "brazil", "australia", "new zealand", "germany", "france", "spain", "italy",
    "netherlands", "belgium", "switzerland", "austria", "sweden", "norway",
    "denmark", "finland", "poland", "portugal", "singapore", "malaysia",
    "indonesia", "philippines", "thailand", "vietnam", "japan", "china",
    "south korea", "uae", "united arab emirates", "saudi arabia", "qatar",
    "israel", "egypt", "nigeria", "kenya", "south africa", "pakistan",
    "bangladesh", "sri lanka", "nepal",
}

US_STATE_NAMES = {
    "alabama", "alaska", "arizona", "arkansas", "california", "colorado",
    "connecticut", "delaware", "florida", "georgia", "hawaii", "idaho",
    "illinois", "indiana", "iowa", "kansas", "kentucky", "louisiana", "maine",
    "maryland", "massachusetts", "michigan", "minnesota", "mississippi",
    "missouri", "montana", "nebraska", "nevada", "new hampshire", "new jersey",
    "new mexico", "new york", "north carolina", "north dakota", "ohio",
    "oklahoma", "oregon", "pennsylvania", "rhode island", "south carolina",
    "south dakota", "tennessee", "texas", "utah", "vermont", "virginia",
    "washington", "west virginia", "wisconsin", "wyoming",
}

# Codes shared with Indian state abbreviations (AR, CT, GA, IN, LA, MN, OR, TN) are left out
US_STATE_CODES = {
    "AL", "AK", "AZ", "CA", "CO", "DE", "FL", "HI", "ID", "IL", "IA", "KS",
    "KY", "ME", "MD", "MA", "MI", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "PA", "RI", "SC", "SD", "TX", "UT",
    "VT", "VA", "WA", "WV", "WI", "WY", "DC",
}

_STATE_CODE_PATTERN = re.compile(r"([A-Za-z]{2})(?:\s+\d{5}(?:-\d{4})?)?")

# Historic and alternate spellings mapped to the name search sources expect
LOCATION_NORMALIZATIONS = {
    "bengaluru": "Bangalore",
    "bombay": "Mumbai",
    "calcutta": "Kolkata",
    "kolkatta": "Kolkata",
    "madras": "Chennai",
    "poona": "Pune",
    "new delhi": "Delhi",
    "gurgaon": "Gurugram",
    "mysore": "Mysuru",
    "allahabad": "Prayagraj",
}

KNOWN_CITY_COORDINATES: dict[str, tuple[float, float]] = {
    "mumbai": (19.0760, 72.8777),
    "delhi": (28.7041, 77.1025),
    "bangalore": (12.9716, 77.5946),
    "bengaluru": (12.9716, 77.5946),
    "hyderabad": (17.3850, 78.4867),
    "chennai": (13.0827, 80.2707),
    "kolkata": (22.5726, 88.3639),
    "pune": (18.5204, 73.8567),
    "ahmedabad": (23.0225, 72.5714),
    "jaipur": (26.9124, 75.7873),
    "surat": (21.1702, 72.8311),
    "lucknow": (26.8467, 80.9462),
    "kanpur": (26.4499, 80.3319),
    "nagpur": (21.1458, 79.0882),
    "indore": (22.7196, 75.8577),
    "thane": (19.2183, 72.9781),
    "navi mumbai": (19.0330, 73.0297),
    "bhopal": (23.2599, 77.4126),
    "visakhapatnam": (17.6868, 83.2185),
    "patna": (25.5941, 85.1376),
    "vadodara": (22.3072, 73.1812),
    "ghaziabad": (28.6692, 77.4538),
    "ludhiana": (30.9010, 75.8573),
    "agra": (27.1767, 78.0081),
    "nashik": (19.9975, 73.7898),
    "faridabad": (28.4089, 77.3178),
    "meerut": (28.9845, 77.7064),
    "rajkot": (22.3039, 70.8022),
    "varanasi": (25.3176, 82.9739),
    "srinagar": (34.0837, 74.7973),
    "aurangabad": (19.8762, 75.3433),
    "dhanbad": (23.7957, 86.4304),
    "amritsar": (31.6340, 74.8723),
    "allahabad": (25.4358, 81.8463),
    "prayagraj": (25.4358, 81.8463),
    "ranchi": (23.3441, 85.3096),
    "howrah": (22.5958, 88.2636),
    "coimbatore": (11.0168, 76.9558),
    "jabalpur": (23.1815, 79.9864),
    "gwalior": (26.2183, 78.1828),
    "vijayawada": (16.5062, 80.6480),
    "jodhpur": (26.2389, 73.0243),
    "madurai": (9.9252, 78.1198),
    "raipur": (21.2514, 81.6296),
    "kota": (25.2138, 75.8648),
    "gurgaon": (28.4595, 77.0266),
    "gurugram": (28.4595, 77.0266),
    "noida": (28.5355, 77.3910),
    "chandigarh": (30.7333, 76.7794),
    "mysore": (12.2958, 76.6394),
    "mysuru": (12.2958, 76.6394),
    "mangalore": (12.9141, 74.8560),
    "hubli": (15.3647, 75.1240),
    "warangal": (17.9689, 79.5941),
    "nizamabad": (18.6725, 78.0941),
    "karimnagar": (18.4386, 79.1288),
    "tiruchirappalli": (10.7905, 78.7047),
    "durgapur": (23.5204, 87.3119),
    "asansol": (23.6739, 86.9524),
    "siliguri": (26.7271, 88.3953),
    "udaipur": (24.5854, 73.7125),
    "kolhapur": (16.7050, 74.2433),
}

# Smaller tech cities tried when a search around a metro finds nothing
NEARBY_TECH_CITIES: dict[str, list[str]] = {
    "bangalore": ["Mysuru", "Mangalore", "Hubli"],
    "bengaluru": ["Mysuru", "Mangalore", "Hubli"],
    "mumbai": ["Pune", "Nashik", "Aurangabad", "Thane", "Navi Mumbai"],
    "delhi": ["Gurgaon", "Noida", "Faridabad", "Ghaziabad"],
    "pune": ["Mumbai", "Nashik", "Kolhapur"],
    "hyderabad": ["Warangal", "Nizamabad", "Karimnagar"],
    "chennai": ["Coimbatore", "Madurai", "Tiruchirappalli"],
    "kolkata": ["Durgapur", "Asansol", "Siliguri"],
    "ahmedabad": ["Vadodara", "Surat", "Rajkot"],
    "jaipur": ["Jodhpur", "Udaipur", "Kota"],
}


def _contains_term(text: str, term: str) -> bool:
    return re.search(rf"\b{re.escape(term.lower())}\b", text) is not None


def has_foreign_suffix(location_text: str) -> bool:
    """True when the last comma-separated part names another country or a US state."""
    parts = location_text.split(",")
    if len(parts) < 2:
        return False
    suffix = parts[-1].strip()
    lowered = suffix.lower()
    if lowered in FOREIGN_COUNTRY_TERMS or lowered in US_STATE_NAMES:
        return True
    match = _STATE_CODE_PATTERN.fullmatch(suffix)
    return match is not None and match.group(1).upper() in US_STATE_CODES


def is_indian_location(location_text: str) -> bool:
    """Check whether a free-text location names a place in India."""
    if not location_text:
        return False
    lowered = location_text.lower()
    if any(_contains_term(lowered, term) for term in COUNTRY_TERMS):
        return True
    if has_foreign_suffix(location_text):
        return False
    return any(_contains_term(lowered, name) for name in INDIAN_CITIES + INDIAN_STATES)


def classify_region(location_text: str) -> str:
    """Return ``"india"`` for Indian locations and ``"global"`` otherwise."""
    region = REGION_INDIA if is_indian_location(location_text) else REGION_GLOBAL
    logger.debug(f"Classified location {location_text!r} as {region}")
    return region


def normalize_location(location_text: str) -> str:
    """Replace alternate city spellings (Bengaluru, Bombay, ...) with canonical ones."""
    if not location_text:
        return location_text
    lowered = location_text.lower()
    for old, new in LOCATION_NORMALIZATIONS.items():
        if _contains_term(lowered, old):
            return re.sub(rf"\b{re.escape(old)}\b", new, location_text, flags=re.IGNORECASE)
    return location_text


def primary_city(location_text: str) -> str:
    """First comma-separated part of a location, e.g. "Pune" for "Pune, India"."""
    return location_text.split(",")[0].strip()


def nearby_cities(location_text: str) -> list[str]:
    """Nearby tech cities for a metro location, empty when none are known."""
    lowered = location_text.lower()
    for city, neighbours in NEARBY_TECH_CITIES.items():
        if _contains_term(lowered, city):
            return list(neighbours)
    return []


def known_coordinates(location_text: str) -> Coordinates | None:
    """Coordinates of the first known city named in the location."""
    lowered = location_text.lower()
    # Longer names first so "navi mumbai" wins over "mumbai"
    for city in sorted(KNOWN_CITY_COORDINATES, key=len, reverse=True):
        if _contains_term(lowered, city):
            lat, lng = KNOWN_CITY_COORDINATES[city]
            return Coordinates(lat=lat, lng=lng)
    return None
