import json
from typing import List, Optional

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate, PromptTemplate

from trip_planner.config import settings
from trip_planner.schemas.trip_schema import TripRequest

PLANNER_PREAMBLE = (
    "You are an expert travel planner with deep knowledge of destinations worldwide. "
    "Create detailed, practical, and personalized travel itineraries."
)

# Shape the model must return. Numbers here are examples, not budgets.
OUTPUT_SCHEMA_EXAMPLE = {
    "overview": "Brief trip summary",
    "bestTimeToVisit": {
        "months": ["March", "April", "May"],
        "weather": "Pleasant weather with temperatures around 25-30°C",
        "crowdLevel": "Medium",
        "reason": "Ideal weather conditions with moderate tourist activity",
    },
    "ecoFriendlySpots": [
        {
            "name": "Location name",
            "description": "Why it's eco-friendly",
            "activities": ["Sustainable activity 1", "Activity 2"],
            "tips": "How to visit responsibly",
        }
    ],
    "dailyItinerary": [
        {
            "day": 1,
            "date": "YYYY-MM-DD",
            "activities": [
                {
                    "time": "9:00 AM",
                    "activity": "Activity name",
                    "description": "Detailed description",
                    "location": "Address or area",
                    "estimatedCost": 50,
                    "tips": "Local tips",
                    "crowdSize": "Low/Medium/High",
                    "bestTimeToAvoidCrowds": "Early morning or late afternoon",
                    "isEcoFriendly": True,
                    "googleMapsLink": "https://www.google.com/maps/search/?api=1&query=LOCATION_NAME",
                }
            ],
            "meals": {
                "breakfast": {"restaurant": "Name", "cuisine": "Type", "estimatedCost": 20},
                "lunch": {"restaurant": "Name", "cuisine": "Type", "estimatedCost": 30},
                "dinner": {"restaurant": "Name", "cuisine": "Type", "estimatedCost": 50},
            },
        }
    ],
    "accommodation": {
        "recommendations": [
            {
                "name": "Hotel/Lodge Name",
                "location": "Area/Address",
                "estimatedCostPerNight": 150,
                "description": "Brief description of amenities",
                "googleMapsLink": "https://www.google.com/maps/search/?api=1&query=HOTEL_NAME+LOCATION",
            }
        ],
        "areas": ["Best area 1", "Best area 2"],
        "ecoFriendlyOptions": ["Eco Hotel 1", "Sustainable Lodge 2"],
    },
    "transportation": {
        "recommendations": ["Metro", "Taxi", "Walking"],
        "estimatedDailyCost": 25,
        "ecoFriendlyOptions": ["Public transport", "Cycling", "Walking"],
    },
    "budgetBreakdown": {
        "accommodation": 1050,
        "meals": 700,
        "activities": 400,
        "transportation": 175,
        "total": 2325,
    },
    "packingList": ["Item 1", "Item 2"],
    "localTips": ["Tip 1", "Tip 2"],
    "weather": "Weather expectations and clothing recommendations",
    "sustainabilityTips": ["Use reusable water bottles", "Choose local guides", "Respect local customs"],
}

itinerary_prompt = PromptTemplate.from_template(
    """Create a detailed travel itinerary for {destination} from {start_date} to {end_date} ({duration_days} days) for {travelers_text}. {budget_text}

Traveler interests: {interests}

IMPORTANT: All costs and prices should be in {currency_name} ({currency_symbol}). Use {currency_symbol} for all monetary values.
CRITICAL JSON RULES:
- Return ONLY valid JSON (no markdown/code fences).
- All numeric fields MUST be plain numbers (e.g., 1380). Do NOT use expressions like "230 * 6".
- Do NOT add notes inside a numeric field like "2000 (Taxi...)"; put notes in a separate string field if needed.
{accommodation_block}
Please provide a comprehensive itinerary that includes:
1. Daily activities and attractions with crowd size information
2. Restaurant recommendations for each meal
3. Transportation suggestions
4. Specific accommodation recommendations WITH Google Maps links (required for multi-day trips)
5. Budget breakdown (if budget provided)
6. Local tips and cultural insights
7. Weather considerations and best time to visit
8. Packing suggestions
9. Eco-friendly spots and sustainable travel options
10. Crowd size expectations for each attraction (Low/Medium/High)
11. Best times to visit specific attractions to avoid crowds
12. Google Maps link for each place/attraction (format: https://www.google.com/maps/search/?api=1&query=LOCATION_NAME)

CRITICAL: Return ONLY a single valid JSON object without any markdown formatting, code blocks, or explanatory text. Start with {{ and end with }}. Use exactly this structure:
{output_schema}"""
)

accommodation_prompt = PromptTemplate.from_template(
    """
CRITICAL: For multi-day trips ({duration_days} days), you MUST provide specific accommodation/lodge recommendations with:
- Name of each recommended lodge/hotel
- Location/area of the lodge
- Estimated cost per night in {currency_symbol}
- Google Maps link for each accommodation (format: https://www.google.com/maps/search/?api=1&query=ACCOMMODATION_NAME+LOCATION)
- Brief description of amenities
These accommodations should fit within the budget of {budget_amount}.
"""
)

planner_chat_prompt = ChatPromptTemplate.from_messages(
    [("human", PLANNER_PREAMBLE + "\n\n{prompt}")]
)

repair_chat_prompt = ChatPromptTemplate.from_messages(
    [
        (
            "human",
            """You returned an itinerary but it was NOT valid JSON.

Fix it and return ONLY valid JSON (no markdown, no explanations).

Rules:
- Ensure the JSON is syntactically valid.
- All numeric fields must be plain numbers (no "230 * 6", no "2000 (Taxi...)", no extra commas).
- Keep the same structure and content as much as possible.

Here is the broken JSON to fix (verbatim):

{raw_content}""",
        )
    ]
)

_CURRENCY_NAMES = {"INR": "Indian Rupees", "USD": "US Dollars", "EUR": "Euros", "GBP": "British Pounds"}


def format_amount(amount: float) -> str:
    """1380.0 -> '1380', 99.5 -> '99.5'"""
    if float(amount).is_integer():
        return str(int(amount))
    return repr(float(amount))


def _budget_text(budget: Optional[float], symbol: str) -> str:
    # A zero budget reads as "no budget given"
    if budget:
        return f"Budget: {symbol}{format_amount(budget)}."
    return "Budget is flexible."


def build_itinerary_prompt(
    request: TripRequest,
    duration_days: int,
    currency_code: Optional[str] = None,
    currency_symbol: Optional[str] = None,
) -> str:
    """Render the planning instruction for one trip. Pure and deterministic."""
    code = currency_code or settings.CURRENCY_CODE
    symbol = currency_symbol or settings.CURRENCY_SYMBOL

    travelers_text = f"{request.travelers} {'person' if request.travelers == 1 else 'people'}"
    interests = ", ".join(request.preferences) or "General sightseeing"

    accommodation_block = ""
    if duration_days > 1:
        budget_amount = (
            f"{symbol}{format_amount(request.budget)}" if request.budget else f"{symbol}flexible amount"
        )
        accommodation_block = accommodation_prompt.format(
            duration_days=duration_days,
            currency_symbol=symbol,
            budget_amount=budget_amount,
        )

    return itinerary_prompt.format(
        destination=request.destination,
        start_date=request.start_date.isoformat(),
        end_date=request.end_date.isoformat(),
        duration_days=duration_days,
        travelers_text=travelers_text,
        budget_text=_budget_text(request.budget, symbol),
        interests=interests,
        currency_name=_CURRENCY_NAMES.get(code.upper(), code),
        currency_symbol=symbol,
        accommodation_block=accommodation_block,
        output_schema=json.dumps(OUTPUT_SCHEMA_EXAMPLE, indent=2, ensure_ascii=False),
    )


def build_planner_messages(prompt: str) -> List[BaseMessage]:
    return planner_chat_prompt.format_messages(prompt=prompt)


def build_repair_messages(raw_content: str) -> List[BaseMessage]:
    return repair_chat_prompt.format_messages(raw_content=raw_content)
