"""
Static asset-type taxonomy and operator alias table.

Read-only lookup data: type keyword -> OpenStreetMap tag predicate groups
plus a display label, and canonical operator name -> known aliases. A type
matches an element when every predicate of at least one of its groups does.
"""
from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple, Union


@dataclass(frozen=True)
class ExactTag:
    """`key=value` match."""
    key: str
    value: str


@dataclass(frozen=True)
class AnyOfTag:
    """Case-insensitive match of `key` against any of several values."""
    key: str
    values: Tuple[str, ...]


TagPredicate = Union[ExactTag, AnyOfTag]
TagGroup = Tuple[TagPredicate, ...]


@dataclass(frozen=True)
class AssetTypeSpec:
    label: str
    groups: Tuple[TagGroup, ...]


def _group(tags: Mapping[str, Union[str, List[str]]]) -> TagGroup:
    predicates: List[TagPredicate] = []
    for key, value in tags.items():
        if isinstance(value, list):
            predicates.append(AnyOfTag(key, tuple(value)))
        else:
            predicates.append(ExactTag(key, value))
    return tuple(predicates)


def _spec(label: str, *groups: Mapping[str, Union[str, List[str]]]) -> AssetTypeSpec:
    return AssetTypeSpec(label=label, groups=tuple(_group(g) for g in groups))


def _source(label: str, source: str) -> AssetTypeSpec:
    """Plants and single generators fed by the same energy source."""
    return _spec(
        label,
        {"power": "plant", "plant:source": source},
        {"power": "generator", "generator:source": source},
    )


_TELECOM = _spec(
    "Telecom Tower",
    {"man_made": "tower", "tower:type": ["communication", "telecommunications"]},
    {"man_made": "mast", "tower:type": ["communication", "telecommunications"]},
)

ASSET_TYPES: Dict[str, AssetTypeSpec] = {
    # Telecom & data
    "telecom": _TELECOM,
    "tower": _TELECOM,
    "data_center": _spec("Data Center", {"building": "data_centre"}, {"telecom": "data_center"}),
    "datacenter": _spec("Data Center", {"building": "data_centre"}, {"telecom": "data_center"}),
    "antenna": _spec("Antenna", {"man_made": "antenna"}),
    "mast": _spec("Mast", {"man_made": "mast"}),
    "radar": _spec("Radar", {"man_made": "surveillance"}),
    # Energy & power
    "power_plant": _spec("Power Plant", {"power": "plant"}),
    "powerplant": _spec("Power Plant", {"power": "plant"}),
    "substation": _spec("Substation", {"power": "substation"}),
    "solar": _spec("Solar Farm", {"power": "generator", "generator:source": "solar"}),
    "wind": _spec("Wind Farm", {"power": "generator", "generator:source": "wind"}),
    "nuclear": _spec("Nuclear Plant", {"power": "generator", "generator:source": "nuclear"}),
    "geothermal": _source("Geothermal Plant", "geothermal"),
    "biogas": _source("Biogas Plant", "biogas"),
    "biomass": _source("Biomass Plant", "biomass"),
    "tidal": _source("Tidal Power Plant", "tidal"),
    "gas_power": _source("Gas Power Plant", "gas"),
    "oil_power": _source("Oil Power Plant", "oil"),
    "coal": _source("Coal Power Plant", "coal"),
    "hydroelectric": _source("Hydroelectric Plant", "hydro"),
    "power_line": _spec("Power Line", {"power": ["line", "minor_line"]}),
    "power_pole": _spec("Power Pole", {"power": ["pole", "tower"]}),
    "transformer": _spec("Transformer", {"power": "transformer"}),
    "dam": _spec("Dam", {"waterway": "dam"}),
    "gasometer": _spec("Gasometer", {"man_made": "gasometer"}),
    # Oil, gas & industry
    "refinery": _spec("Refinery", {"man_made": "petroleum_well"}),
    "pipeline": _spec("Pipeline", {"man_made": "pipeline"}),
    "oil_well": _spec("Oil Well", {"man_made": "petroleum_well"}),
    "gas_well": _spec("Gas Well", {"man_made": "petroleum_well"}),
    "storage_tank": _spec("Storage Tank", {"man_made": "storage_tank"}),
    "silo": _spec("Silo", {"man_made": "silo"}),
    "chimney": _spec("Chimney", {"man_made": "chimney"}),
    "cooling_tower": _spec("Cooling Tower", {"man_made": "cooling_tower"}),
    "factory": _spec("Factory", {"building": "industrial"}),
    "industrial": _spec("Industrial Zone", {"landuse": "industrial"}),
    "warehouse": _spec("Warehouse", {"building": "warehouse"}),
    "works": _spec("Works", {"man_made": "works"}),
    "crane": _spec("Crane", {"man_made": "crane"}),
    "landfill": _spec("Landfill", {"landuse": "landfill"}),
    "quarry": _spec("Quarry", {"landuse": "quarry"}),
    "mine": _spec("Mine", {"landuse": "quarry"}),
    # Water
    "water_tower": _spec("Water Tower", {"man_made": "water_tower"}),
    "water_treatment": _spec("Water Treatment Plant", {"man_made": "water_works"}),
    "wastewater": _spec("Wastewater Plant", {"man_made": "wastewater_plant"}),
    "sewage": _spec("Sewage Plant", {"man_made": "wastewater_plant"}),
    "windmill": _spec("Windmill", {"man_made": "windmill"}),
    "watermill": _spec("Watermill", {"man_made": "watermill"}),
    # Aviation
    "airport": _spec("Airport", {"aeroway": "aerodrome"}),
    "helipad": _spec("Helipad", {"aeroway": "helipad"}),
    "runway": _spec("Runway", {"aeroway": "runway"}),
    "taxiway": _spec("Taxiway", {"aeroway": "taxiway"}),
    "terminal": _spec("Airport Terminal", {"aeroway": "terminal"}),
    "hangar": _spec("Hangar", {"aeroway": "hangar"}, {"building": "hangar"}),
    "atc_tower": _spec("Air Traffic Control Tower", {"aeroway": "control_tower"}),
    # Maritime
    "port": _spec("Port", {"landuse": "port"}),
    "seaport": _spec("Seaport", {"landuse": "port"}, {"industrial": "port"}),
    "harbour": _spec("Harbour", {"harbour": "yes"}),
    "dock": _spec("Dock", {"waterway": "dock"}),
    "marina": _spec("Marina", {"leisure": "marina"}),
    "shipyard": _spec("Shipyard", {"industrial": "shipyard"}, {"landuse": "shipyard"}),
    "ferry_terminal": _spec("Ferry Terminal", {"amenity": "ferry_terminal"}),
    "lighthouse": _spec("Lighthouse", {"man_made": "lighthouse"}),
    # Rail & road
    "railyard": _spec("Rail Yard", {"landuse": "railway"}),
    "rail_yard": _spec("Rail Yard", {"landuse": "railway"}),
    "train_station": _spec("Train Station", {"railway": "station"}),
    "halt": _spec("Railway Halt", {"railway": "halt"}),
    "metro": _spec("Metro Station", {"railway": "subway_entrance"}, {"station": "subway"}),
    "tram_stop": _spec("Tram Stop", {"railway": "tram_stop"}),
    "bus_station": _spec("Bus Station", {"amenity": "bus_station"}),
    "level_crossing": _spec("Level Crossing", {"railway": ["level_crossing", "crossing"]}),
    "toll_booth": _spec("Toll Booth", {"barrier": "toll_booth"}),
    "weigh_station": _spec("Weigh Station", {"amenity": "weighbridge"}),
    "rest_area": _spec("Rest Area", {"highway": "rest_area"}),
    "service_area": _spec("Service Area", {"highway": "services"}),
    "bridge": _spec("Bridge", {"man_made": "bridge"}),
    "tunnel": _spec("Tunnel", {"tunnel": "yes"}),
    "parking": _spec("Parking", {"amenity": "parking"}),
    "fuel": _spec("Fuel Station", {"amenity": "fuel"}),
    "gas_station": _spec("Gas Station", {"amenity": "fuel"}),
    "petrol": _spec("Petrol Station", {"amenity": "fuel"}),
    "charging_station": _spec("EV Charging Station", {"amenity": "charging_station"}),
    # Military & security
    "military": _spec("Military Installation", {"landuse": "military"}),
    "bunker": _spec("Bunker", {"military": "bunker"}),
    "barracks": _spec("Barracks", {"military": "barracks"}),
    "airfield": _spec("Military Airfield", {"military": "airfield"}),
    "naval_base": _spec("Naval Base", {"military": "naval_base"}),
    "nuclear_site": _spec("Nuclear Site", {"military": "nuclear_explosion_site"}),
    "range": _spec("Military Range", {"military": "range"}),
    "checkpoint": _spec("Checkpoint", {"military": "checkpoint"}),
    "border_control": _spec("Border Control", {"barrier": "border_control"}),
    "prison": _spec("Prison", {"amenity": "prison"}),
    "embassy": _spec("Embassy", {"amenity": "embassy"}, {"office": "diplomatic"}),
    "police": _spec("Police Station", {"amenity": "police"}),
    "courthouse": _spec("Courthouse", {"amenity": "courthouse"}),
    # Emergency services
    "fire_station": _spec("Fire Station", {"amenity": "fire_station"}),
    "ambulance_station": _spec("Ambulance Station", {"emergency": "ambulance_station"}),
    "rescue_station": _spec("Rescue Station", {"emergency": ["rescue_station", "mountain_rescue"]}),
    "lifeguard": _spec("Lifeguard Station", {"emergency": ["lifeguard", "lifeguard_base", "lifeguard_tower"]}),
    "fire_hydrant": _spec("Fire Hydrant", {"emergency": "fire_hydrant"}),
    "emergency_phone": _spec("Emergency Phone", {"emergency": "phone"}),
    "coast_guard": _spec("Coast Guard Station", {"emergency": "coast_guard"}, {"amenity": "coast_guard"}),
    # Civic & health
    "hospital": _spec("Hospital", {"amenity": "hospital"}),
    "clinic": _spec("Clinic", {"amenity": "clinic"}),
    "pharmacy": _spec("Pharmacy", {"amenity": "pharmacy"}),
    "dentist": _spec("Dentist", {"amenity": "dentist"}),
    "veterinary": _spec("Veterinary", {"amenity": "veterinary"}),
    "school": _spec("School", {"amenity": "school"}),
    "university": _spec("University", {"amenity": "university"}),
    "college": _spec("College", {"amenity": "college"}),
    "library": _spec("Library", {"amenity": "library"}),
    "post_office": _spec("Post Office", {"amenity": "post_office"}),
    "recycling": _spec("Recycling Center", {"amenity": "recycling"}),
    "bank": _spec("Bank", {"amenity": "bank"}),
    "atm": _spec("ATM", {"amenity": "atm"}),
    "stadium": _spec("Stadium", {"leisure": "stadium"}),
    "museum": _spec("Museum", {"tourism": "museum"}),
    "theatre": _spec("Theatre", {"amenity": "theatre"}),
    "cinema": _spec("Cinema", {"amenity": "cinema"}),
    "hotel": _spec("Hotel", {"tourism": "hotel"}),
    "observatory": _spec("Observatory", {"man_made": "observatory"}),
    "cemetery": _spec("Cemetery", {"landuse": "cemetery"}),
    "place_of_worship": _spec("Place of Worship", {"amenity": "place_of_worship"}),
    "mosque": _spec("Mosque", {"amenity": "place_of_worship", "religion": "muslim"}),
    "church": _spec("Church", {"amenity": "place_of_worship", "religion": "christian"}),
    "temple": _spec("Temple", {"amenity": "place_of_worship", "religion": "hindu"}),
    "synagogue": _spec("Synagogue", {"amenity": "place_of_worship", "religion": "jewish"}),
}

# Declaration order matters: the parser returns the first canonical name found.
OPERATOR_ALIASES: Dict[str, List[str]] = {
    "airtel": ["bharti airtel", "airtel india", "airtel telecom"],
    "jio": ["reliance jio", "jio infocomm"],
    "vodafone": ["vodafone idea", "vi", "vodafone india"],
    "bsnl": ["bharat sanchar nigam"],
    "google": ["google llc", "google inc"],
    "amazon": ["amazon web services", "aws"],
    "microsoft": ["microsoft azure", "azure"],
    "meta": ["facebook", "meta platforms"],
    "apple": ["apple inc"],
    "at&t": ["att", "at and t"],
    "verizon": ["verizon wireless"],
    "t-mobile": ["tmobile", "t mobile"],
    "vodacom": ["vodacom group"],
    "mtn": ["mtn group"],
    "orange": ["orange telecom"],
    "telefonica": ["movistar"],
    "china mobile": ["cmcc"],
    "china unicom": [],
    "china telecom": [],
    "ntpc": ["national thermal power corporation"],
    "adani": ["adani power", "adani green"],
    "tata": ["tata power", "tata steel"],
    "reliance": ["reliance industries", "ril"],
}


def get_asset_type(key: str) -> AssetTypeSpec | None:
    return ASSET_TYPES.get(key)


def is_known_type(key: str) -> bool:
    return key in ASSET_TYPES
