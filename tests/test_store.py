import json

from db.sticky_json import StickyConfig, StickyStore


def test_missing_file_means_empty(tmp_path):
    store = StickyStore(str(tmp_path / "nope.json"))
    assert store.load() == 0
    assert len(store) == 0


def test_put_persists_snapshot(tmp_path):
    path = tmp_path / "data" / "sticky.json"
    store = StickyStore(str(path))
    store.put(StickyConfig(content="Welcome!", channel_id="111", author_id="5", last_message_id="77"))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["111"]["content"] == "Welcome!"
    assert data["111"]["lastMessageId"] == "77"
    assert data["111"]["renderAsRichCard"] is True
    assert data["111"]["cardColor"] == "#FFFF00"
    assert data["111"]["customFooterTemplate"] is None


def test_reload_restores_configs(tmp_path):
    path = str(tmp_path / "sticky.json")
    store = StickyStore(path)
    store.put(StickyConfig(content="📌 rules", channel_id="1", render_as_rich_card=False, custom_footer_template="f"))
    store.put(StickyConfig(content="two", channel_id="2", card_color="#ABC"))

    fresh = StickyStore(path)
    assert fresh.load() == 2
    assert fresh.get(1).content == "📌 rules"
    assert fresh.get("1").render_as_rich_card is False
    assert fresh.get("1").custom_footer_template == "f"
    assert fresh.get(2).card_color == "#ABC"


def test_pop_rewrites_file(tmp_path):
    path = tmp_path / "sticky.json"
    store = StickyStore(str(path))
    store.put(StickyConfig(content="x", channel_id="1"))
    assert store.pop(1) is not None
    assert json.loads(path.read_text()) == {}
    assert store.pop(1) is None


def test_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "sticky.json"
    path.write_text("{not json")
    store = StickyStore(str(path))
    assert store.load() == 0


def test_skips_malformed_entries(tmp_path):
    path = tmp_path / "sticky.json"
    path.write_text(json.dumps({"1": {"content": ""}, "2": "junk", "3": {"content": "ok"}}))
    store = StickyStore(str(path))
    assert store.load() == 1
    assert "3" in store


def test_loads_legacy_field_names(tmp_path):
    path = tmp_path / "sticky-data.json"
    path.write_text(json.dumps({
        "123": {
            "content": "Hello",
            "channelId": "123",
            "authorId": "9",
            "createdAt": "2024-01-01T00:00:00.000Z",
            "messageId": "456",
            "useEmbed": False,
            "customFooter": "Read me",
            "embedColor": "#FF0000",
        }
    }))
    store = StickyStore(str(path))
    store.load()
    config = store.get(123)
    assert config.last_message_id == "456"
    assert config.render_as_rich_card is False
    assert config.custom_footer_template == "Read me"
    assert config.card_color == "#FF0000"
    assert config.created_at == "2024-01-01T00:00:00.000Z"


def test_numeric_ids_become_strings():
    config = StickyConfig.from_dict({"content": "x", "channelId": 5, "lastMessageId": 9})
    assert config.channel_id == "5"
    assert config.last_message_id == "9"
