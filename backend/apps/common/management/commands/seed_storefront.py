from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.carts.models import CartItem
from apps.catalog.models import Category, Product
from apps.common import get_logger
from apps.users.models import User

logger = get_logger(__name__).bind(component="common", layer="command")

CATEGORIES = [
    ("Centrifugal Pumps", "centrifugal-pumps"),
    ("Circulating Pumps", "circulating-pumps"),
    ("Pressure Pumps", "pressure-pumps"),
    ("Self-Priming Pumps", "self-priming-pumps"),
    ("Submersible Pumps and Motors", "submersible-pumps-and-motors"),
]

# (title, slug, category slug, price, stock, image)
PRODUCTS = [
    (
        "0.5 HP Espa Prisma 15 2M Pressure Pump",
        "0-5hp-espa-prisma-15-2m-pressure-pump",
        "pressure-pumps",
        "56000.00",
        10,
        "/centrifugal/espa_0.8hp.webp",
    ),
    (
        "0.5 HP Espa Prisma 15 2M Pressure Pump (Made in China)",
        "0-5hp-espa-prisma-15-2m-pressure-pump-made-in-china",
        "pressure-pumps",
        "40000.00",
        10,
        "/centrifugal/espa_0.8hp.webp",
    ),
    (
        "0.8 HP Espa Prisma 15 3M Pressure Pump",
        "0-8hp-espa-prisma-15-3m-pressure-pump",
        "pressure-pumps",
        "56000.00",
        10,
        "/centrifugal/espa_0.8hp.webp",
    ),
    (
        "0.8 HP Espa Prisma 15 3M Pressure Pump (Made in China)",
        "0-8hp-espa-prisma-15-3m-pressure-pump-made-in-china",
        "pressure-pumps",
        "40000.00",
        10,
        "/centrifugal/espa_0.8hp.webp",
    ),
    (
        "1.0 HP Espa Prisma 15 4M Pressure Pump",
        "1-0hp-espa-prisma-15-4m-pressure-pump",
        "pressure-pumps",
        "56000.00",
        10,
        "/centrifugal/espa_0.8hp.webp",
    ),
    (
        "1.0 HP Espa Prisma 15 4M Pressure Pump (Made in China)",
        "1-0hp-espa-prisma-15-4m-pressure-pump-made-in-china",
        "pressure-pumps",
        "40000.00",
        10,
        "/centrifugal/espa_0.8hp.webp",
    ),
]

DEMO_CUSTOMER = {
    "username": "customer",
    "email": "customer@example.com",
    "firstname": "Demo",
    "lastname": "Customer",
    "password": "customer-pass-123",
}


class Command(BaseCommand):
    help = "Seed sample categories and products for local development."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete existing cart lines, products and categories before seeding",
        )
        parser.add_argument(
            "--with-customer",
            action="store_true",
            help="Also create a demo customer account",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            CartItem.objects.all().delete()
            Product.objects.all().delete()
            Category.objects.all().delete()

        self.stdout.write("Seeding categories...")
        slug_to_category = {}
        for name, slug in CATEGORIES:
            category, _ = Category.objects.update_or_create(
                slug=slug, defaults={"name": name}
            )
            slug_to_category[slug] = category

        self.stdout.write("Seeding products...")
        created_count = 0
        for title, slug, category_slug, price, stock, image in PRODUCTS:
            _, created = Product.objects.update_or_create(
                slug=slug,
                defaults={
                    "title": title,
                    "category": slug_to_category[category_slug],
                    "price": Decimal(price),
                    "stock": stock,
                    "image": image,
                    "status": Product.Status.ACTIVE,
                },
            )
            created_count += int(created)

        if options["with_customer"]:
            self.stdout.write("Seeding demo customer...")
            attrs = dict(DEMO_CUSTOMER)
            password = attrs.pop("password")
            user, _ = User.objects.get_or_create(
                username=attrs["username"], defaults=attrs
            )
            user.set_password(password)
            user.save()

        logger.info(
            "Storefront seed completed",
            categories=len(CATEGORIES),
            products=len(PRODUCTS),
            created=created_count,
        )
        self.stdout.write(self.style.SUCCESS("Storefront seed completed."))
