from fastapi import APIRouter, Depends

from api.security import denied_response, require_route
from iwems.models import ScreenView, ViewState

cultural_router = APIRouter()

PERFORMANCES = [
    {
        "id": 1,
        "name": "Traditional Dance Ensemble",
        "type": "Dance Performance",
        "description": "Experience authentic cultural dances performed by skilled artists",
        "duration": "45 minutes",
        "price": "$800",
    },
    {
        "id": 2,
        "name": "Classical Orchestra",
        "type": "Musical Performance",
        "description": "Live classical music to create an elegant atmosphere",
        "duration": "2 hours",
        "price": "$1,500",
    },
    {
        "id": 3,
        "name": "Cultural Art Exhibition",
        "type": "Visual Arts",
        "description": "Curated display of traditional artworks and crafts",
        "duration": "Full event",
        "price": "$1,200",
    },
]

# Fixed suggestion lists; nothing here is computed from the user's events.
SUGGESTION_GROUPS = [
    {
        "title": "Based on Your Event Theme",
        "suggestions": [
            "Traditional Henna Artist - Perfect for your cultural celebration",
            "Folk Music Band - Matches your preference for live entertainment",
            "Cultural Storyteller - Adds unique narrative element",
        ],
    },
    {
        "title": "Popular in Your Area",
        "suggestions": [
            "Local Dance Troupe - Highly rated by recent couples",
            "Contemporary Fusion Band - Blends traditional and modern",
            "Cultural Cuisine Demonstration - Interactive guest experience",
        ],
    },
]


@cultural_router.get("", response_model=ScreenView)
async def cultural_activities(decision=Depends(require_route("/cultural"))):
    if not decision.allowed:
        return denied_response("/cultural", decision)
    return ScreenView(
        screen="/cultural",
        state=ViewState.AUTHORIZED_POPULATED,
        data={"performances": PERFORMANCES, "suggestion_groups": SUGGESTION_GROUPS},
    )
