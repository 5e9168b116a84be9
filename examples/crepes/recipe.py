"""Cook crêpes as a graph of joins.

Shopping for each ingredient and heating the pan run concurrently; mixing
waits for the ingredients, cooking waits for the batter and the pan. A
``join_fresh`` variant checks every ingredient before it is used.

Run with ``python -m crepes.recipe --crepes 3`` from the ``examples`` directory.
"""

import argparse
import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from conjoin import decorated_join, join, join_all, settle

logger = logging.getLogger(__name__)

SHOP_DELAYS = {"flour": 0.03, "eggs": 0.01, "milk": 0.02, "butter": 0.01}


class SpoiledIngredient(Exception):
    pass


@dataclass(frozen=True)
class Ingredient:
    name: str
    fresh: bool = True


@dataclass(frozen=True)
class Crepe:
    number: int
    batter: str


async def shop(name: str, delay: float, spoiled: bool = False) -> Ingredient:
    await asyncio.sleep(delay)
    logger.info("bought %s", name)
    return Ingredient(name, fresh=not spoiled)


async def heat_pan(delay: float = 0.02) -> str:
    await asyncio.sleep(delay)
    return "hot pan"


async def check_freshness(ingredient) -> Ingredient:
    ingredient = await settle(ingredient)
    if not ingredient.fresh:
        raise SpoiledIngredient(ingredient.name)
    return ingredient


join_fresh = decorated_join(check_freshness, name="join_fresh")


def mix(*ingredients: Ingredient) -> str:
    return "batter(" + ", ".join(i.name for i in ingredients) + ")"


def make_breakfast(n_crepes: int = 2, spoiled: Optional[List[str]] = None) -> asyncio.Future:
    """Build the graph and return the future of the plated crêpes."""
    spoiled = spoiled or []
    groceries: Dict[str, asyncio.Future] = {
        name: asyncio.ensure_future(shop(name, delay, spoiled=name in spoiled))
        for name, delay in SHOP_DELAYS.items()
    }
    batter = join_fresh(*groceries.values(), mix)
    pan = asyncio.ensure_future(heat_pan())
    crepes = [join(batter, pan, lambda b, _pan, n=n: Crepe(n, b)) for n in range(1, n_crepes + 1)]
    return join_all(crepes, lambda *plated: list(plated))


async def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--crepes", type=int, default=2, help="number of crêpes to cook")
    parser.add_argument("--spoiled", action="append", default=[], help="ingredient gone bad")
    args = parser.parse_args(argv)
    try:
        plated = await make_breakfast(args.crepes, args.spoiled)
    except SpoiledIngredient as exc:
        print(f"no breakfast: {exc} is spoiled")
        return 1
    for crepe in plated:
        print(f"crêpe #{crepe.number}: {crepe.batter}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(asyncio.run(main()))
