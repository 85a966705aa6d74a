"""Command-line front end for Soko Link.

Usage:
    # Buyer: search businesses and Soko Mtaani items near a location
    sokolink search "Vibanda vya mboga" "Buru Buru shopping center"

    # Browse and filter community items
    sokolink browse --if-empty
    sokolink items --query sofa --category Furniture

    # Seller: profile, products and listings
    sokolink profile set --name "Joe's Kiosk" --address "Main St"
    sokolink product add "Sukuma wiki" "KES 30"
    sokolink list-item --title "Sofa" --description "3-seater" --price 15000

    # Messaging
    sokolink message user-item-sofa... "Sofa" "Is it still available?"
    sokolink inbox

State lives in the persisted store configured by settings, so each command
sees the previous one's changes.
"""

import argparse
import asyncio
import sys
from typing import Optional, Sequence

import structlog

from sokolink.config.settings import get_settings
from sokolink.core.exceptions import GatewayError
from sokolink.core.logging_config import configure_logging
from sokolink.models.schemas import (
    Business,
    BusinessCategory,
    CommunityItem,
    CommunityItemCategory,
    ItemCondition,
    ItemStatus,
    Product,
    Role,
)
from sokolink.services.catalog import (
    active_listing_count,
    available_items,
    build_listing,
    filter_items,
    item_categories,
)
from sokolink.services.marketplace import Marketplace, build_marketplace

logger = structlog.get_logger(__name__)


# =============================================================================
# Rendering
# =============================================================================


def format_business(business: Business) -> str:
    flags = []
    if business.delivery:
        flags.append("delivery")
    if business.negotiable:
        flags.append("negotiable")
    lines = [
        f"[{business.id}] {business.name} ({business.category.value}) {business.price_range}",
        f"    {business.address} | {business.phone or '-'} | {business.hours or '-'}",
    ]
    if flags:
        lines.append(f"    {', '.join(flags)}")
    for product in business.products:
        lines.append(f"    - {product.name}: {product.price}")
    return "\n".join(lines)


def format_item(item: CommunityItem) -> str:
    negotiable = " (negotiable)" if item.negotiable else ""
    return "\n".join([
        f"[{item.id}] {item.title} - {item.price}{negotiable} [{item.status.value}]",
        f"    {item.category.value} | {item.condition.value} | {item.location} | {item.seller_name}",
        f"    {item.description}",
    ])


def print_items(items: list[CommunityItem]) -> None:
    if not items:
        print("No items found.")
    for item in items:
        print(format_item(item))


# =============================================================================
# Commands
# =============================================================================


def cmd_search(marketplace: Marketplace, args: argparse.Namespace) -> int:
    ok = asyncio.run(marketplace.search(args.query, args.location))
    if not ok:
        print(f"Error: {marketplace.error}", file=sys.stderr)
        return 1
    print(f"Local businesses ({len(marketplace.state.businesses)}):")
    for business in marketplace.state.businesses:
        print(format_business(business))
    print(f"\nSoko Mtaani ({len(available_items(marketplace.community_feed()))}):")
    print_items(available_items(marketplace.community_feed()))
    return 0


def cmd_browse(marketplace: Marketplace, args: argparse.Namespace) -> int:
    if args.if_empty:
        ok = asyncio.run(marketplace.start_community())
    else:
        ok = asyncio.run(marketplace.browse_community(args.location))
    if not ok:
        print(f"Error: {marketplace.error}", file=sys.stderr)
        return 1
    print_items(available_items(marketplace.community_feed()))
    return 0


def cmd_businesses(marketplace: Marketplace, args: argparse.Namespace) -> int:
    if not marketplace.state.businesses:
        print("No businesses yet. Run a search first." if not marketplace.state.has_searched
              else "No businesses found.")
    for business in marketplace.state.businesses:
        print(format_business(business))
    return 0


def cmd_items(marketplace: Marketplace, args: argparse.Namespace) -> int:
    items = marketplace.state.user_items if args.mine else marketplace.community_feed()
    if not args.all:
        items = available_items(items)
    if args.mine:
        print(f"Active listings: {active_listing_count(marketplace.state.user_items)}")
    else:
        categories = ", ".join(c.value for c in item_categories(items))
        print(f"Categories: {categories or '-'}")
    print_items(filter_items(items, args.query, args.category))
    return 0


def cmd_list_item(marketplace: Marketplace, args: argparse.Namespace) -> int:
    try:
        draft = build_listing(
            marketplace.state.profile,
            title=args.title,
            description=args.description,
            price=args.price,
            condition=ItemCondition(args.condition),
            category=CommunityItemCategory(args.category),
            image_url=args.image_url,
            negotiable=not args.fixed_price,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    item = marketplace.add_item(draft)
    if item is None:
        print("This item is already listed.")
        return 0
    print("Success! Your item has been listed.")
    print(format_item(item))
    return 0


def cmd_delete_item(marketplace: Marketplace, args: argparse.Namespace) -> int:
    if marketplace.delete_item(args.item_id):
        print(f"Deleted {args.item_id}")
    return 0


def cmd_status(marketplace: Marketplace, args: argparse.Namespace) -> int:
    if marketplace.update_item_status(args.item_id, ItemStatus(args.status)):
        print(f"{args.item_id} is now {args.status}")
    return 0


def cmd_message(marketplace: Marketplace, args: argparse.Namespace) -> int:
    conversation = marketplace.send_message(args.item_id, args.item_name, args.text)
    print(f"Message sent ({len(conversation.messages)} in conversation {conversation.id})")
    return 0


def cmd_reply(marketplace: Marketplace, args: argparse.Namespace) -> int:
    if marketplace.reply(args.conversation_id, args.text):
        print("Reply sent")
    return 0


def cmd_inbox(marketplace: Marketplace, args: argparse.Namespace) -> int:
    role = marketplace.role
    print(f"{role.value} inbox, {marketplace.unread_count()} unread")
    for conversation in marketplace.state.conversations:
        marker = " " if conversation.is_read_by(role) else "*"
        print(f"{marker} [{conversation.id}] {conversation.item_name}")
        if args.verbose:
            for message in conversation.messages:
                stamp = message.timestamp.strftime("%Y-%m-%d %H:%M")
                print(f"      {stamp} {message.sender.value}: {message.text}")
    return 0


def cmd_read(marketplace: Marketplace, args: argparse.Namespace) -> int:
    marketplace.mark_read(args.conversation_id)
    return 0


def cmd_favorite(marketplace: Marketplace, args: argparse.Namespace) -> int:
    if args.kind == "business":
        pool = {b.id: b for b in [*marketplace.state.favorite_businesses, *marketplace.state.businesses]}
        business = pool.get(args.record_id)
        if business is None:
            print(f"Unknown business {args.record_id}", file=sys.stderr)
            return 1
        favorited = marketplace.toggle_favorite_business(business)
    else:
        pool = {i.id: i for i in [*marketplace.state.favorite_items, *marketplace.community_feed()]}
        item = pool.get(args.record_id)
        if item is None:
            print(f"Unknown item {args.record_id}", file=sys.stderr)
            return 1
        favorited = marketplace.toggle_favorite_item(item)
    print("Added to favorites" if favorited else "Removed from favorites")
    return 0


def cmd_favorites(marketplace: Marketplace, args: argparse.Namespace) -> int:
    print(f"Favorite businesses ({len(marketplace.state.favorite_businesses)}):")
    for business in marketplace.state.favorite_businesses:
        print(format_business(business))
    print(f"\nFavorite items ({len(marketplace.state.favorite_items)}):")
    print_items(marketplace.state.favorite_items)
    return 0


PROFILE_FIELDS = {
    "name": "business_name",
    "address": "address",
    "category": "category",
    "phone": "phone",
    "hours": "hours",
    "price_range": "price_range",
    "website": "website",
    "instagram": "instagram",
    "facebook": "facebook",
    "twitter": "twitter",
    "whatsapp": "whatsapp",
    "delivery": "delivery",
    "negotiable": "negotiable",
}


def cmd_profile(marketplace: Marketplace, args: argparse.Namespace) -> int:
    if args.profile_command == "set":
        updates = {
            field: getattr(args, option)
            for option, field in PROFILE_FIELDS.items()
            if getattr(args, option) is not None
        }
        profile = marketplace.state.profile.model_validate(
            {**marketplace.state.profile.model_dump(), **updates}
        )
        marketplace.save_profile(profile)
        print("Business profile saved.")

    print(marketplace.state.profile.model_dump_json(indent=2))
    return 0


def cmd_product(marketplace: Marketplace, args: argparse.Namespace) -> int:
    if args.product_command == "add":
        marketplace.add_product(Product(name=args.name, price=args.price))
        print(f"Added {args.name}")
    else:
        removed = marketplace.delete_product(args.name)
        print(f"Removed {removed} product(s) named {args.name}")
    return 0


def cmd_role(marketplace: Marketplace, args: argparse.Namespace) -> int:
    if args.role:
        marketplace.set_role(Role(args.role.capitalize()))
    print(f"Current role: {marketplace.role.value}")
    return 0


def cmd_tip(marketplace: Marketplace, args: argparse.Namespace) -> int:
    print(asyncio.run(marketplace.negotiation_tip(args.item_name, args.text)))
    return 0


def cmd_describe(marketplace: Marketplace, args: argparse.Namespace) -> int:
    print(asyncio.run(marketplace.describe_item(args.title)))
    return 0


def cmd_price(marketplace: Marketplace, args: argparse.Namespace) -> int:
    print(asyncio.run(marketplace.suggest_price(args.title, args.description)))
    return 0


# =============================================================================
# Parser
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sokolink",
        description="Soko Link - find local businesses and neighbourhood deals",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("search", help="Search businesses and community items")
    p.add_argument("query", help="Business type, e.g. 'Vibanda vya mboga'")
    p.add_argument("location", help="Area to search in")
    p.set_defaults(handler=cmd_search)

    p = sub.add_parser("browse", help="Fetch Soko Mtaani items")
    p.add_argument("--location", default=None)
    p.add_argument("--if-empty", action="store_true",
                   help="Only fetch when no items are loaded yet")
    p.set_defaults(handler=cmd_browse)

    p = sub.add_parser("businesses", help="Show the last business results")
    p.set_defaults(handler=cmd_businesses)

    p = sub.add_parser("items", help="Show and filter community items")
    p.add_argument("--query", "-q", default="")
    p.add_argument("--category", "-c", default=None)
    p.add_argument("--all", action="store_true", help="Include sold items")
    p.add_argument("--mine", action="store_true", help="Only your own listings")
    p.set_defaults(handler=cmd_items)

    p = sub.add_parser("list-item", help="List an item for sale")
    p.add_argument("--title", required=True)
    p.add_argument("--description", required=True)
    p.add_argument("--price", type=int, required=True, help="Whole shillings")
    p.add_argument("--condition", choices=[c.value for c in ItemCondition],
                   default=ItemCondition.USED_GOOD.value)
    p.add_argument("--category", choices=[c.value for c in CommunityItemCategory],
                   default=CommunityItemCategory.OTHER.value)
    p.add_argument("--image-url", default=None)
    p.add_argument("--fixed-price", action="store_true", help="Price is not negotiable")
    p.set_defaults(handler=cmd_list_item)

    p = sub.add_parser("delete-item", help="Delete one of your listings")
    p.add_argument("item_id")
    p.set_defaults(handler=cmd_delete_item)

    p = sub.add_parser("status", help="Mark a listing available or sold")
    p.add_argument("item_id")
    p.add_argument("status", choices=[s.value for s in ItemStatus])
    p.set_defaults(handler=cmd_status)

    p = sub.add_parser("message", help="Message a seller about an item")
    p.add_argument("item_id")
    p.add_argument("item_name")
    p.add_argument("text")
    p.set_defaults(handler=cmd_message)

    p = sub.add_parser("reply", help="Reply to a buyer")
    p.add_argument("conversation_id")
    p.add_argument("text")
    p.set_defaults(handler=cmd_reply)

    p = sub.add_parser("inbox", help="List conversations for the current role")
    p.add_argument("--verbose", "-v", action="store_true", help="Show messages")
    p.set_defaults(handler=cmd_inbox)

    p = sub.add_parser("read", help="Mark a conversation read for the current role")
    p.add_argument("conversation_id")
    p.set_defaults(handler=cmd_read)

    p = sub.add_parser("favorite", help="Toggle a favorite")
    p.add_argument("kind", choices=["business", "item"])
    p.add_argument("record_id")
    p.set_defaults(handler=cmd_favorite)

    p = sub.add_parser("favorites", help="Show favorites")
    p.set_defaults(handler=cmd_favorites)

    p = sub.add_parser("profile", help="Show or update your business profile")
    profile_sub = p.add_subparsers(dest="profile_command", required=True)
    profile_sub.add_parser("show")
    ps = profile_sub.add_parser("set")
    ps.add_argument("--name")
    ps.add_argument("--address")
    ps.add_argument("--category", choices=[c.value for c in BusinessCategory])
    ps.add_argument("--phone")
    ps.add_argument("--hours")
    ps.add_argument("--price-range", dest="price_range")
    ps.add_argument("--website")
    ps.add_argument("--instagram")
    ps.add_argument("--facebook")
    ps.add_argument("--twitter")
    ps.add_argument("--whatsapp")
    ps.add_argument("--delivery", action=argparse.BooleanOptionalAction, default=None)
    ps.add_argument("--negotiable", action=argparse.BooleanOptionalAction, default=None)
    p.set_defaults(handler=cmd_profile)

    p = sub.add_parser("product", help="Manage your product catalogue")
    product_sub = p.add_subparsers(dest="product_command", required=True)
    pa = product_sub.add_parser("add")
    pa.add_argument("name")
    pa.add_argument("price")
    pd = product_sub.add_parser("delete")
    pd.add_argument("name")
    p.set_defaults(handler=cmd_product)

    p = sub.add_parser("role", help="Show or switch role")
    p.add_argument("role", nargs="?", choices=["buyer", "seller"])
    p.set_defaults(handler=cmd_role)

    p = sub.add_parser("tip", help="Get a negotiation tip for an item")
    p.add_argument("item_name")
    p.add_argument("text")
    p.set_defaults(handler=cmd_tip)

    p = sub.add_parser("describe", help="Generate a listing description")
    p.add_argument("title")
    p.set_defaults(handler=cmd_describe)

    p = sub.add_parser("price", help="Suggest a listing price in KES")
    p.add_argument("title")
    p.add_argument("--description", default="")
    p.set_defaults(handler=cmd_price)

    return parser


def main(argv: Optional[Sequence[str]] = None, marketplace: Optional[Marketplace] = None) -> int:
    """Main entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    if marketplace is None:
        settings = get_settings()
        configure_logging(settings)
        marketplace = build_marketplace(settings)

    logger.debug("command_started", command=args.command)
    try:
        return args.handler(marketplace, args)
    except GatewayError as e:
        logger.error("command_failed", command=args.command, error=e.message)
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
