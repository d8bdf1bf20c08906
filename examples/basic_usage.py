"""Basic usage examples for the rallyhub services."""

import asyncio

from rallydb import AsyncRallyDBClient
from rallyhub import QueryCache, build_services, get_repositories
from rallyhub import config


async def main() -> None:
    async with AsyncRallyDBClient(config.BACKEND_URL, config.BACKEND_ANON_KEY) as db:
        services = build_services(get_repositories(db), QueryCache())

        print("=== Upcoming rallies ===")
        upcoming = await services.rallies.list_upcoming(limit=5)
        for r in upcoming:
            print(f"  {r.name} - {r.game_name or 'unknown game'}, {r.competition_date:%Y-%m-%d %H:%M}")

        print("\n=== Latest news ===")
        for article in await services.news.latest():
            print(f"  {article.title} ({article.author_name or 'staff'})")

        championships = await services.championships.list_public()
        if not championships:
            print("\n  No championships found.")
            return

        championship = championships[0]
        print(f"\n=== Standings: {championship.name} ===")
        standings = await services.championships.get_standings(championship.id)
        for warning in standings.warnings:
            print(f"  ! {warning}")
        for p in standings.participants:
            print(
                f"  [{p.class_name}] P{p.championship_position} {p.participant_name}: "
                f"{p.total_overall_points:g} pts in {p.rounds_participated} rounds"
            )

        # Second read inside the staleness window is served from the cache
        await services.championships.get_standings(championship.id)


if __name__ == "__main__":
    asyncio.run(main())
