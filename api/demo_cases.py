"""Pre-built demo claims seeded into the in-memory stores."""

DEMO_ORG_ID = "ORG-DEMO"

DEMO_CLAIMS = [
    # ============== EARLY LIFECYCLE ==============
    {
        "id": "CLM-1001",
        "title": "Hail damage to asphalt shingle roof",
        "carrier": "State Farm",
        "estimated_value": 18500,
        "damage_type": "hail",
        "states": ["INTAKE", "INSPECTED"],
        "attributes": {
            "description": "Hail storm bruising and granule loss on all slopes",
            "roof": {"slope": 6, "age": 8, "type": "ASPHALT", "hail_hits": 10},
            "photos": {"count": 3, "annotated": False, "test_square": False},
            "narrative": {"code_citations": 0},
            "estimate": {"has_underlayment": False, "material_match": True},
        },
    },
    {
        "id": "CLM-1002",
        "title": "Wind damage with lifted shingles",
        "carrier": "Allstate",
        "estimated_value": 9400,
        "damage_type": "wind",
        "states": ["INTAKE", "INSPECTED", "ESTIMATE_DRAFTED"],
        "attributes": {
            "description": "Wind storm lifted and creased shingles on the west slope",
            "roof": {"slope": 4, "age": 15, "type": "ASPHALT"},
            "photos": {"count": 6, "annotated": True, "test_square": True},
            "docs": {"weather_report": False},
            "wind_damage": True,
        },
    },
    # ============== WITH CARRIER ==============
    {
        "id": "CLM-1003",
        "title": "Hail damage to roof and gutters",
        "carrier": "State Farm",
        "estimated_value": 62000,
        "damage_type": "hail",
        "denial_reason": "Pricing above carrier cost database",
        "states": ["INTAKE", "INSPECTED", "ESTIMATE_DRAFTED", "SUBMITTED", "NEGOTIATING"],
        "attributes": {
            "description": "Hail storm damage to shingles, gutters and vents",
            "roof": {"slope": 7, "age": 12, "type": "ASPHALT", "hail_hits": 12},
            "photos": {"count": 24, "annotated": True, "test_square": True},
            "docs": {"engineering_report": False, "comparison": False},
            "narrative": {"code_citations": 1},
            "outcome": "partial",
            "negotiation_attempted": False,
        },
    },
    {
        "id": "CLM-1004",
        "title": "Water intrusion after storm",
        "carrier": "Progressive",
        "estimated_value": 14200,
        "damage_type": "water",
        "denial_reason": "Damage due to age and wear",
        "states": ["INTAKE", "INSPECTED", "ESTIMATE_DRAFTED", "SUBMITTED"],
        "attributes": {
            "description": "Ceiling stains and water intrusion following storm",
            "roof": {"slope": 5, "age": 22, "type": "ASPHALT"},
            "photos": {"count": 12, "annotated": True, "test_square": False},
            "water_damage": True,
            "storm_opening": False,
            "gradual_damage": True,
            "days_since_submission": 21,
        },
    },
    # ============== LATE LIFECYCLE ==============
    {
        "id": "CLM-1005",
        "title": "Full replacement tile roof",
        "carrier": "USAA",
        "estimated_value": 41000,
        "damage_type": "hail",
        "states": [
            "INTAKE", "INSPECTED", "ESTIMATE_DRAFTED", "SUBMITTED", "APPROVED",
            "IN_PRODUCTION", "COMPLETE",
        ],
        "attributes": {
            "description": "Cracked tiles after hail storm, manufacturer repair limits apply",
            "roof": {"slope": 5, "age": 9, "type": "TILE", "hail_hits": 9},
            "photos": {"count": 30, "annotated": True, "test_square": True},
        },
    },
    {
        "id": "CLM-1006",
        "title": "New lead from storm canvass",
        "carrier": None,
        "estimated_value": None,
        "damage_type": "hail",
        "states": [],
        "attributes": {"description": "Homeowner reported hail storm damage"},
    },
]
