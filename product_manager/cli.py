"""Flask CLI commands for admin operations."""
import click


DEMO_PRODUCTS = [
    ("Walnut Desk Organizer", "Solid walnut tray with three compartments.", "active", "2025-01-12"),
    ("Linen Table Runner", "Stone-washed linen, 180 cm long.", "active", "2025-02-03"),
    ("Ceramic Pour-Over Set", "Dripper, carafe and two cups in matte white.", "inactive", "2025-02-21"),
    ("Wool Throw Blanket", "Merino wool throw in charcoal herringbone.", "active", "2025-03-08"),
    ("Brass Bookends", "Pair of weighted brass bookends.", "inactive", "2025-03-30"),
    ("Cotton Tote Bag", "Heavy canvas tote with inner pocket.", "active", "2025-04-14"),
    ("Oak Cutting Board", "End-grain oak board with juice groove.", "active", "2025-05-02"),
]


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        from product_manager.extensions import db

        db.create_all()
        click.echo("Database initialized.")

    @app.cli.command("seed-demo")
    def seed_demo():
        """Seed demo products without images (idempotent)."""
        from product_manager.extensions import db
        from product_manager.models.product import Product

        # Only seed if no products exist yet
        if Product.query.first():
            click.echo("Products already exist, skipping demo seed.")
            return

        for title, description, status, date in DEMO_PRODUCTS:
            db.session.add(
                Product(title=title, description=description, status=status, date=date)
            )
        db.session.commit()
        click.echo(f"Seeded {len(DEMO_PRODUCTS)} demo products.")

    @app.cli.command("stats")
    def stats():
        """Show product statistics."""
        from product_manager.services.product_service import get_stats

        s = get_stats()
        total = sum(s.values())
        click.echo(f"Total products: {total}")
        for status, count in sorted(s.items()):
            click.echo(f"  {status}: {count}")
