import logging
from decimal import Decimal
from functools import lru_cache

import requests
from pydantic import BaseModel

from showroom.models.vehicle import VehicleType
from showroom.services.ai_providers import AIProvider, build_provider
from showroom.utils.ai_config import AIConfig, load_ai_config

logger = logging.getLogger(__name__)


class VehicleDescriptionInput(BaseModel):
    type: VehicleType
    brand: str
    model: str
    year: int
    color: str
    engine_size: str
    price: Decimal


def format_price(price: Decimal) -> str:
    price = Decimal(price)
    if price == price.to_integral_value():
        return f"{int(price):,}"
    return f"{price:,.2f}"


def build_prompt(vehicle: VehicleDescriptionInput) -> str:
    return f"""Create an engaging, professional sales description for this vehicle:

Vehicle Details:
- Type: {vehicle.type.value}
- Brand: {vehicle.brand}
- Model: {vehicle.model}
- Year: {vehicle.year}
- Color: {vehicle.color}
- Engine: {vehicle.engine_size}
- Price: ${format_price(vehicle.price)}

Requirements:
- 2-3 paragraphs (150-200 words)
- Highlight key features and benefits
- Use persuasive but professional language
- Include emotional appeal
- Focus on value proposition
- Make it sound exciting and desirable

Generate a compelling description that would attract potential buyers:"""


def build_fallback_description(vehicle: VehicleDescriptionInput) -> str:
    name = f"{vehicle.brand} {vehicle.model}"
    return (
        f"Experience the perfect blend of performance and style with this {vehicle.year} {name}. "
        f"This stunning {vehicle.color} {vehicle.type.value} features a powerful {vehicle.engine_size} engine "
        f"that delivers both efficiency and excitement on every drive.\n\n"
        f"With its sleek design and premium features, this vehicle offers exceptional value at "
        f"${format_price(vehicle.price)}. Whether you're commuting to work or embarking on weekend "
        f"adventures, this {name} provides the reliability and sophistication you deserve.\n\n"
        f"Don't miss this opportunity to own a vehicle that combines cutting-edge technology with "
        f"timeless style. Contact us today to schedule a test drive and experience the difference "
        f"for yourself!"
    )


class AIDescriptionService:
    def __init__(self, config: AIConfig, http: requests.Session = None):
        self.config = config
        self.provider: AIProvider = build_provider(config)
        self.http = http or requests.Session()

    def generate_description(self, vehicle: VehicleDescriptionInput) -> str:
        """
        Ask the configured provider for a sales description.

        Makes a single attempt bounded by the configured timeout. Any failure
        (network, HTTP status, malformed or empty body) yields the templated
        fallback text instead, so this never raises.
        """
        try:
            request = self.provider.build_request(build_prompt(vehicle))
            response = self.http.post(
                request.url,
                headers=request.headers,
                params=request.params,
                json=request.json_body,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            description = self.provider.parse_response(response.json())
        except Exception as e:
            logger.warning(
                f"{self.config.provider.value} API error, using fallback description: {e}"
            )
            return build_fallback_description(vehicle)

        if not description:
            logger.info("Empty AI response, using fallback description")
            return build_fallback_description(vehicle)

        return description


@lru_cache
def get_ai_service() -> AIDescriptionService:
    # provider is selected once per process
    return AIDescriptionService(load_ai_config())
