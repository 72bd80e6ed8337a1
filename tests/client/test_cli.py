"""Tests for the command-line client."""

from client.cart import AnonymousCart
from client.cli import build_parser, build_session, cmd_cart, cmd_login, cmd_logout
from client.storage import AUTH_KEY


def _run(handler, session, *argv):
    args = build_parser().parse_args(list(argv))
    handler(session, args)


class TestCartCommands:
    def test_guest_add_goes_to_device(self, api, tmp_path, capsys):
        session = build_session(tmp_path / "storage.json", api=api)

        _run(cmd_cart, session, "cart", "add", "p1", "--quantity", "2")
        _run(cmd_cart, session, "cart", "count")

        api.add_to_cart.assert_not_called()
        assert AnonymousCart(session.store).items() == [{"product_id": "p1", "quantity": 2}]
        assert capsys.readouterr().out.strip().endswith("2")

    def test_signed_in_add_goes_to_server(self, api, tmp_path):
        session = build_session(tmp_path / "storage.json", api=api)
        session.login("jane@example.com", "secret-password")

        _run(cmd_cart, session, "cart", "add", "p1")

        api.add_to_cart.assert_called_once_with("p1", 1)


class TestSessionCommands:
    def test_login_reports_merge(self, api, tmp_path, capsys):
        session = build_session(tmp_path / "storage.json", api=api)
        AnonymousCart(session.store).add("p1")

        _run(cmd_login, session, "login", "jane@example.com", "--password", "secret-password")

        out = capsys.readouterr().out
        assert "Signed in as Jane Doe" in out
        assert "Merged 1 cart item(s)" in out

    def test_stored_identity_is_resumed(self, api, tmp_path):
        build_session(tmp_path / "storage.json", api=api).login("jane@example.com", "secret-password")
        api.token = None

        session = build_session(tmp_path / "storage.json", api=api)

        assert session.is_authenticated
        assert session.user["id"] == "user-1"

    def test_logout(self, api, tmp_path):
        session = build_session(tmp_path / "storage.json", api=api)
        session.login("jane@example.com", "secret-password")

        _run(cmd_logout, session, "logout")

        assert AUTH_KEY not in session.store
