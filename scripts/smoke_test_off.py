import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from foodfacts_mcp.data_providers.openfoodfacts import OpenFoodFactsClient
from foodfacts_mcp.services.resolver import ProductResolver


async def main() -> None:
    client = OpenFoodFactsClient()
    resolver = ProductResolver(client)
    for term in ["nutella", "3017620422003", "oatly oat drink"]:
        resolved = await resolver.resolve(term)
        print(f"identifier={term} found={resolved is not None}")
        print(f"last_error={client.last_error} last_status={client.last_status}")
        if resolved:
            p = resolved.product
            print(f"- {p.product_name} | brand={p.brands} | nutriscore={p.nutriscore_grade} | barcode={p.barcode}")
        print("---")


if __name__ == "__main__":
    asyncio.run(main())
