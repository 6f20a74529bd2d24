"""Bundled gazetteer of Indian states / union territories and cities.

Coordinates are city centres in decimal degrees.  Population figures are
census municipal counts and are only present for the larger cities; metro
flags mark the eight tier-1 metros.  The data is loaded once into an
immutable :class:`~src.services.gazetteer.Gazetteer` at startup.
"""

from __future__ import annotations

from typing import Any, Final

# ---------------------------------------------------------------------------
# States and union territories (28 states + 8 UTs)
# ---------------------------------------------------------------------------

STATES: Final[list[dict[str, str]]] = [
    {"name": "Andhra Pradesh", "code": "AP"},
    {"name": "Arunachal Pradesh", "code": "AR"},
    {"name": "Assam", "code": "AS"},
    {"name": "Bihar", "code": "BR"},
    {"name": "Chhattisgarh", "code": "CG"},
    {"name": "Goa", "code": "GA"},
    {"name": "Gujarat", "code": "GJ"},
    {"name": "Haryana", "code": "HR"},
    {"name": "Himachal Pradesh", "code": "HP"},
    {"name": "Jharkhand", "code": "JH"},
    {"name": "Karnataka", "code": "KA"},
    {"name": "Kerala", "code": "KL"},
    {"name": "Madhya Pradesh", "code": "MP"},
    {"name": "Maharashtra", "code": "MH"},
    {"name": "Manipur", "code": "MN"},
    {"name": "Meghalaya", "code": "ML"},
    {"name": "Mizoram", "code": "MZ"},
    {"name": "Nagaland", "code": "NL"},
    {"name": "Odisha", "code": "OR"},
    {"name": "Punjab", "code": "PB"},
    {"name": "Rajasthan", "code": "RJ"},
    {"name": "Sikkim", "code": "SK"},
    {"name": "Tamil Nadu", "code": "TN"},
    {"name": "Telangana", "code": "TG"},
    {"name": "Tripura", "code": "TR"},
    {"name": "Uttar Pradesh", "code": "UP"},
    {"name": "Uttarakhand", "code": "UK"},
    {"name": "West Bengal", "code": "WB"},
    {"name": "Andaman and Nicobar Islands", "code": "AN"},
    {"name": "Chandigarh", "code": "CH"},
    {"name": "Dadra and Nagar Haveli and Daman and Diu", "code": "DN"},
    {"name": "Delhi", "code": "DL"},
    {"name": "Jammu and Kashmir", "code": "JK"},
    {"name": "Ladakh", "code": "LA"},
    {"name": "Lakshadweep", "code": "LD"},
    {"name": "Puducherry", "code": "PY"},
]

# ---------------------------------------------------------------------------
# Cities
# ---------------------------------------------------------------------------

CITIES: Final[list[dict[str, Any]]] = [
    # Metro cities
    {"id": "mumbai", "name": "Mumbai", "state": "Maharashtra", "state_code": "MH", "lat": 19.0760, "lng": 72.8777, "is_metro": True, "population": 12442373},
    {"id": "delhi", "name": "Delhi", "state": "Delhi", "state_code": "DL", "lat": 28.7041, "lng": 77.1025, "is_metro": True, "population": 11034555},
    {"id": "bangalore", "name": "Bangalore", "state": "Karnataka", "state_code": "KA", "lat": 12.9716, "lng": 77.5946, "is_metro": True, "population": 8443675},
    {"id": "hyderabad", "name": "Hyderabad", "state": "Telangana", "state_code": "TG", "lat": 17.3850, "lng": 78.4867, "is_metro": True, "population": 6809970},
    {"id": "ahmedabad", "name": "Ahmedabad", "state": "Gujarat", "state_code": "GJ", "lat": 23.0225, "lng": 72.5714, "is_metro": True, "population": 5570585},
    {"id": "chennai", "name": "Chennai", "state": "Tamil Nadu", "state_code": "TN", "lat": 13.0827, "lng": 80.2707, "is_metro": True, "population": 4681087},
    {"id": "kolkata", "name": "Kolkata", "state": "West Bengal", "state_code": "WB", "lat": 22.5726, "lng": 88.3639, "is_metro": True, "population": 4496694},
    {"id": "pune", "name": "Pune", "state": "Maharashtra", "state_code": "MH", "lat": 18.5204, "lng": 73.8567, "is_metro": True, "population": 3124458},
    # Major cities
    {"id": "surat", "name": "Surat", "state": "Gujarat", "state_code": "GJ", "lat": 21.1702, "lng": 72.8311, "is_metro": False, "population": 4467797},
    {"id": "jaipur", "name": "Jaipur", "state": "Rajasthan", "state_code": "RJ", "lat": 26.9124, "lng": 75.7873, "is_metro": False, "population": 3046163},
    {"id": "lucknow", "name": "Lucknow", "state": "Uttar Pradesh", "state_code": "UP", "lat": 26.8467, "lng": 80.9462, "is_metro": False, "population": 2815601},
    {"id": "kanpur", "name": "Kanpur", "state": "Uttar Pradesh", "state_code": "UP", "lat": 26.4499, "lng": 80.3319, "is_metro": False, "population": 2767031},
    {"id": "nagpur", "name": "Nagpur", "state": "Maharashtra", "state_code": "MH", "lat": 21.1458, "lng": 79.0882, "is_metro": False, "population": 2405665},
    {"id": "indore", "name": "Indore", "state": "Madhya Pradesh", "state_code": "MP", "lat": 22.7196, "lng": 75.8577, "is_metro": False, "population": 1964086},
    {"id": "thane", "name": "Thane", "state": "Maharashtra", "state_code": "MH", "lat": 19.2183, "lng": 72.9781, "is_metro": False, "population": 1841488},
    {"id": "bhopal", "name": "Bhopal", "state": "Madhya Pradesh", "state_code": "MP", "lat": 23.2599, "lng": 77.4126, "is_metro": False, "population": 1798218},
    {"id": "visakhapatnam", "name": "Visakhapatnam", "state": "Andhra Pradesh", "state_code": "AP", "lat": 17.6868, "lng": 83.2185, "is_metro": False, "population": 1730320},
    {"id": "pimpri-chinchwad", "name": "Pimpri-Chinchwad", "state": "Maharashtra", "state_code": "MH", "lat": 18.6298, "lng": 73.7997, "is_metro": False, "population": 1729359},
    {"id": "patna", "name": "Patna", "state": "Bihar", "state_code": "BR", "lat": 25.5941, "lng": 85.1376, "is_metro": False, "population": 1684222},
    {"id": "vadodara", "name": "Vadodara", "state": "Gujarat", "state_code": "GJ", "lat": 22.3072, "lng": 73.1812, "is_metro": False, "population": 1666703},
    {"id": "ghaziabad", "name": "Ghaziabad", "state": "Uttar Pradesh", "state_code": "UP", "lat": 28.6692, "lng": 77.4538, "is_metro": False, "population": 1648643},
    {"id": "ludhiana", "name": "Ludhiana", "state": "Punjab", "state_code": "PB", "lat": 30.9010, "lng": 75.8573, "is_metro": False, "population": 1618879},
    {"id": "agra", "name": "Agra", "state": "Uttar Pradesh", "state_code": "UP", "lat": 27.1767, "lng": 78.0081, "is_metro": False, "population": 1585704},
    {"id": "nashik", "name": "Nashik", "state": "Maharashtra", "state_code": "MH", "lat": 19.9975, "lng": 73.7898, "is_metro": False, "population": 1486973},
    {"id": "faridabad", "name": "Faridabad", "state": "Haryana", "state_code": "HR", "lat": 28.4089, "lng": 77.3178, "is_metro": False, "population": 1414050},
    {"id": "meerut", "name": "Meerut", "state": "Uttar Pradesh", "state_code": "UP", "lat": 28.9845, "lng": 77.7064, "is_metro": False, "population": 1305429},
    {"id": "rajkot", "name": "Rajkot", "state": "Gujarat", "state_code": "GJ", "lat": 22.3039, "lng": 70.8022, "is_metro": False, "population": 1286995},
    {"id": "kalyan-dombivli", "name": "Kalyan-Dombivli", "state": "Maharashtra", "state_code": "MH", "lat": 19.2403, "lng": 73.1305, "is_metro": False, "population": 1246381},
    {"id": "vasai-virar", "name": "Vasai-Virar", "state": "Maharashtra", "state_code": "MH", "lat": 19.4912, "lng": 72.8052, "is_metro": False, "population": 1221233},
    {"id": "varanasi", "name": "Varanasi", "state": "Uttar Pradesh", "state_code": "UP", "lat": 25.3176, "lng": 82.9739, "is_metro": False, "population": 1201815},
    {"id": "srinagar", "name": "Srinagar", "state": "Jammu and Kashmir", "state_code": "JK", "lat": 34.0837, "lng": 74.7973, "is_metro": False, "population": 1180570},
    {"id": "aurangabad", "name": "Aurangabad", "state": "Maharashtra", "state_code": "MH", "lat": 19.8762, "lng": 75.3433, "is_metro": False, "population": 1175116},
    {"id": "dhanbad", "name": "Dhanbad", "state": "Jharkhand", "state_code": "JH", "lat": 23.7957, "lng": 86.4304, "is_metro": False, "population": 1162472},
    {"id": "amritsar", "name": "Amritsar", "state": "Punjab", "state_code": "PB", "lat": 31.6340, "lng": 74.8723, "is_metro": False, "population": 1132761},
    {"id": "navi-mumbai", "name": "Navi Mumbai", "state": "Maharashtra", "state_code": "MH", "lat": 19.0330, "lng": 73.0297, "is_metro": False, "population": 1119477},
    {"id": "allahabad", "name": "Allahabad", "state": "Uttar Pradesh", "state_code": "UP", "lat": 25.4358, "lng": 81.8463, "is_metro": False, "population": 1117094},
    {"id": "ranchi", "name": "Ranchi", "state": "Jharkhand", "state_code": "JH", "lat": 23.3441, "lng": 85.3096, "is_metro": False, "population": 1073440},
    {"id": "howrah", "name": "Howrah", "state": "West Bengal", "state_code": "WB", "lat": 22.5958, "lng": 88.2636, "is_metro": False, "population": 1072161},
    {"id": "coimbatore", "name": "Coimbatore", "state": "Tamil Nadu", "state_code": "TN", "lat": 11.0168, "lng": 76.9558, "is_metro": False, "population": 1061447},
    {"id": "jabalpur", "name": "Jabalpur", "state": "Madhya Pradesh", "state_code": "MP", "lat": 23.1815, "lng": 79.9864, "is_metro": False, "population": 1055525},
    {"id": "gwalior", "name": "Gwalior", "state": "Madhya Pradesh", "state_code": "MP", "lat": 26.2183, "lng": 78.1828, "is_metro": False, "population": 1054420},
    # State capitals and other important cities
    {"id": "kochi", "name": "Kochi", "state": "Kerala", "state_code": "KL", "lat": 9.9312, "lng": 76.2673, "is_metro": False, "population": None},
    {"id": "thiruvananthapuram", "name": "Thiruvananthapuram", "state": "Kerala", "state_code": "KL", "lat": 8.5241, "lng": 76.9366, "is_metro": False, "population": None},
    {"id": "bhubaneswar", "name": "Bhubaneswar", "state": "Odisha", "state_code": "OR", "lat": 20.2961, "lng": 85.8245, "is_metro": False, "population": None},
    {"id": "chandigarh", "name": "Chandigarh", "state": "Chandigarh", "state_code": "CH", "lat": 30.7333, "lng": 76.7794, "is_metro": False, "population": None},
    {"id": "mysore", "name": "Mysore", "state": "Karnataka", "state_code": "KA", "lat": 12.2958, "lng": 76.6394, "is_metro": False, "population": None},
    {"id": "salem", "name": "Salem", "state": "Tamil Nadu", "state_code": "TN", "lat": 11.6643, "lng": 78.1460, "is_metro": False, "population": None},
    {"id": "madurai", "name": "Madurai", "state": "Tamil Nadu", "state_code": "TN", "lat": 9.9252, "lng": 78.1198, "is_metro": False, "population": None},
    {"id": "guwahati", "name": "Guwahati", "state": "Assam", "state_code": "AS", "lat": 26.1445, "lng": 91.7362, "is_metro": False, "population": None},
    {"id": "jodhpur", "name": "Jodhpur", "state": "Rajasthan", "state_code": "RJ", "lat": 26.2389, "lng": 73.0243, "is_metro": False, "population": None},
    {"id": "raipur", "name": "Raipur", "state": "Chhattisgarh", "state_code": "CG", "lat": 21.2514, "lng": 81.6296, "is_metro": False, "population": None},
    {"id": "kota", "name": "Kota", "state": "Rajasthan", "state_code": "RJ", "lat": 25.2138, "lng": 75.8648, "is_metro": False, "population": None},
    {"id": "guntur", "name": "Guntur", "state": "Andhra Pradesh", "state_code": "AP", "lat": 16.3067, "lng": 80.4365, "is_metro": False, "population": None},
    {"id": "hubli-dharwad", "name": "Hubli-Dharwad", "state": "Karnataka", "state_code": "KA", "lat": 15.3647, "lng": 75.1240, "is_metro": False, "population": None},
    {"id": "mangalore", "name": "Mangalore", "state": "Karnataka", "state_code": "KA", "lat": 12.9141, "lng": 74.8560, "is_metro": False, "population": None},
    {"id": "tiruchirappalli", "name": "Tiruchirappalli", "state": "Tamil Nadu", "state_code": "TN", "lat": 10.7905, "lng": 78.7047, "is_metro": False, "population": None},
    {"id": "bareilly", "name": "Bareilly", "state": "Uttar Pradesh", "state_code": "UP", "lat": 28.3670, "lng": 79.4304, "is_metro": False, "population": None},
    {"id": "aligarh", "name": "Aligarh", "state": "Uttar Pradesh", "state_code": "UP", "lat": 27.8974, "lng": 78.0880, "is_metro": False, "population": None},
    {"id": "tiruppur", "name": "Tiruppur", "state": "Tamil Nadu", "state_code": "TN", "lat": 11.1085, "lng": 77.3411, "is_metro": False, "population": None},
    {"id": "gurgaon", "name": "Gurgaon", "state": "Haryana", "state_code": "HR", "lat": 28.4595, "lng": 77.0266, "is_metro": False, "population": None},
    {"id": "noida", "name": "Noida", "state": "Uttar Pradesh", "state_code": "UP", "lat": 28.5355, "lng": 77.3910, "is_metro": False, "population": None},
    {"id": "bikaner", "name": "Bikaner", "state": "Rajasthan", "state_code": "RJ", "lat": 28.0229, "lng": 73.3119, "is_metro": False, "population": None},
    {"id": "dehradun", "name": "Dehradun", "state": "Uttarakhand", "state_code": "UK", "lat": 30.3165, "lng": 78.0322, "is_metro": False, "population": None},
    {"id": "shimla", "name": "Shimla", "state": "Himachal Pradesh", "state_code": "HP", "lat": 31.1048, "lng": 77.1734, "is_metro": False, "population": None},
]
