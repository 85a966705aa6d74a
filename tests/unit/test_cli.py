"""Unit tests for the command-line front end, driven through main()."""

import pytest

from sokolink.cli import main
from sokolink.core.exceptions import GatewayNotConfiguredError, GatewayUnavailableError
from sokolink.models.schemas import ItemStatus, Role


class TestSearchCommands:
    """Tests for search and browse."""

    def test_search_prints_results(self, marketplace, gateway, business_draft, item_draft, capsys):
        gateway.find_businesses.return_value = [business_draft]
        gateway.find_community_items.return_value = [item_draft]

        code = main(["search", "groceries", "Buru Buru"], marketplace=marketplace)

        out = capsys.readouterr().out
        assert code == 0
        assert "Mama Njeri Groceries" in out
        assert "Samsung 32-inch TV" in out

    def test_search_failure_returns_error(self, marketplace, gateway, capsys):
        gateway.find_businesses.side_effect = GatewayUnavailableError(
            "boom", user_message="Failed to find businesses."
        )

        code = main(["search", "groceries", "Buru Buru"], marketplace=marketplace)

        assert code == 1
        assert "Failed to find businesses." in capsys.readouterr().err

    def test_browse_if_empty(self, marketplace, gateway, item_draft, capsys):
        gateway.find_community_items.return_value = [item_draft]

        assert main(["browse", "--if-empty"], marketplace=marketplace) == 0
        assert main(["browse", "--if-empty"], marketplace=marketplace) == 0

        gateway.find_community_items.assert_awaited_once_with("Kenya")
        assert "Samsung 32-inch TV" in capsys.readouterr().out

    def test_businesses_before_search(self, marketplace, capsys):
        main(["businesses"], marketplace=marketplace)

        assert "Run a search first" in capsys.readouterr().out


class TestSellerCommands:
    """Tests for listings, profile and products."""

    def test_list_item_and_mark_sold(self, marketplace, capsys):
        code = main(
            ["list-item", "--title", "Sofa", "--description", "3-seater",
             "--price", "12000", "--category", "Furniture"],
            marketplace=marketplace,
        )

        assert code == 0
        item = marketplace.state.user_items[0]
        assert item.price == "Ksh 12,000"
        assert "Success!" in capsys.readouterr().out

        main(["status", item.id, "sold"], marketplace=marketplace)
        assert marketplace.state.user_items[0].status == ItemStatus.SOLD

        main(["items", "--mine"], marketplace=marketplace)
        assert "Active listings: 0" in capsys.readouterr().out

    def test_list_item_rejects_bad_price(self, marketplace, capsys):
        code = main(
            ["list-item", "--title", "Sofa", "--description", "3-seater", "--price", "0"],
            marketplace=marketplace,
        )

        assert code == 2
        assert marketplace.state.user_items == []

    def test_duplicate_listing(self, marketplace, capsys):
        argv = ["list-item", "--title", "Sofa", "--description", "x", "--price", "100"]
        main(argv, marketplace=marketplace)
        main(argv, marketplace=marketplace)

        assert len(marketplace.state.user_items) == 1
        assert "already listed" in capsys.readouterr().out

    def test_profile_set(self, marketplace, capsys):
        main(
            ["profile", "set", "--name", "Joe's Kiosk", "--address", "Main St",
             "--category", "cafe", "--delivery"],
            marketplace=marketplace,
        )

        profile = marketplace.state.profile
        assert profile.business_name == "Joe's Kiosk"
        assert profile.category.value == "cafe"
        assert profile.delivery is True
        assert profile.hours == "Mon-Fri 9am-5pm"

    def test_products(self, marketplace, capsys):
        main(["product", "add", "Milk", "KES 60"], marketplace=marketplace)
        main(["product", "delete", "Milk"], marketplace=marketplace)

        assert marketplace.state.profile.products == []
        assert "Removed 1 product(s)" in capsys.readouterr().out

    def test_role_switch(self, marketplace, capsys):
        main(["role", "seller"], marketplace=marketplace)

        assert marketplace.role == Role.SELLER
        assert "Current role: Seller" in capsys.readouterr().out


class TestMessagingCommands:
    """Tests for the inbox flow."""

    def test_message_reply_inbox(self, marketplace, capsys):
        main(["message", "ai-item-sofa", "Sofa", "Is it available?"], marketplace=marketplace)
        main(["role", "seller"], marketplace=marketplace)
        capsys.readouterr()

        main(["inbox", "-v"], marketplace=marketplace)
        out = capsys.readouterr().out
        assert "Seller inbox, 1 unread" in out
        assert "Buyer: Is it available?" in out

        main(["reply", "ai-item-sofa", "Yes"], marketplace=marketplace)
        assert marketplace.unread_count(Role.SELLER) == 0
        assert marketplace.unread_count(Role.BUYER) == 1

    def test_favorite_unknown_item(self, marketplace, capsys):
        assert main(["favorite", "item", "nope"], marketplace=marketplace) == 1

    def test_favorite_item_toggle(self, marketplace, listing_draft, capsys):
        item = marketplace.add_item(listing_draft)

        main(["favorite", "item", item.id], marketplace=marketplace)
        assert marketplace.is_favorite_item(item.id)

        main(["favorite", "item", item.id], marketplace=marketplace)
        assert not marketplace.is_favorite_item(item.id)


class TestAssistanceCommands:
    """Tests for AI helper commands."""

    def test_price(self, marketplace, gateway, capsys, captured_logs):
        gateway.suggest_price.return_value = "15000"

        assert main(["price", "Samsung TV"], marketplace=marketplace) == 0
        assert capsys.readouterr().out == "15000\n"
        started = {"event": "command_started", "command": "price", "log_level": "debug"}
        assert started in captured_logs

    def test_gateway_not_configured(self, marketplace, gateway, capsys):
        gateway.generate_description.side_effect = GatewayNotConfiguredError(
            "no key", user_message="The AI service is not available."
        )

        assert main(["describe", "Sofa"], marketplace=marketplace) == 1
        assert "The AI service is not available." in capsys.readouterr().err


def test_command_is_required():
    with pytest.raises(SystemExit):
        main([])
