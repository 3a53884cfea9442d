from paintball.admin.settings import get_venue_settings
from paintball.db.models import Addon, Package, Resource
from paintball.db.session import SessionLocal


PACKAGES = [
    {"name": "Découverte", "price_cents": 2000, "included_balls": 120, "duration_min": 120},
    {"name": "Méditerranée", "price_cents": 2500, "included_balls": 200, "duration_min": 120},
    {"name": "Player", "price_cents": 3000, "included_balls": 300, "duration_min": 120},
    {
        "name": "Punisher",
        "price_cents": 3500,
        "included_balls": 450,
        "duration_min": 120,
        "is_promo": True,
    },
    {"name": "Expendables", "price_cents": 4500, "included_balls": 600, "duration_min": 120},
    {"name": "Tout public", "price_cents": 1800, "included_balls": 120, "duration_min": 90},
    {"name": "Link Ranger Paintball", "price_cents": 1800, "included_balls": 120, "duration_min": 90},
    {"name": "Link Ranger Orbeez", "price_cents": 1800, "included_balls": 1600, "duration_min": 60},
]

ADDONS = [
    {"name": "Recharge +100 billes", "price_cents": 600},
    {"name": "Combinaison", "price_cents": 400},
    {"name": "Gants coqués", "price_cents": 250},
    {"name": "Costume de lapin", "price_cents": 2500},
    {"name": "Nocturne", "price_cents": 400},
]

RESOURCES = [{"name": "Terrain A", "capacity": 1}]


def seed_demo_venue() -> None:
    session = SessionLocal()
    try:
        existing_packages = {p.name for p in session.query(Package).all()}
        for values in PACKAGES:
            if values["name"] in existing_packages:
                continue
            session.add(
                Package(
                    name=values["name"],
                    price_cents=values["price_cents"],
                    duration_min=values["duration_min"],
                    included_balls=values["included_balls"],
                    is_promo=values.get("is_promo", False),
                    is_public=True,
                )
            )

        existing_addons = {a.name for a in session.query(Addon).all()}
        for values in ADDONS:
            if values["name"] not in existing_addons:
                session.add(Addon(**values))

        existing_resources = {r.name for r in session.query(Resource).all()}
        for values in RESOURCES:
            if values["name"] not in existing_resources:
                session.add(Resource(**values))

        session.commit()
        settings = get_venue_settings(session)
        print(
            f"Seeded {len(PACKAGES)} packages, {len(ADDONS)} addons, "
            f"{len(RESOURCES)} resources; settings id={settings.id}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    seed_demo_venue()
