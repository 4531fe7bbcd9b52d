"""Tests for tag helpers."""

from tfaws import tags
from tfaws.tags import IgnoreTagsConfig


class TestMerge:
    """Tests for merge() and the filters."""

    def test_resource_tags_override_defaults(self):
        """Resource tags win over default tags with the same key."""
        assert tags.merge({"env": "dev", "team": "db"}, {"env": "prod"}) == {
            "env": "prod",
            "team": "db",
        }

    def test_none(self):
        """Missing tag maps merge to empty."""
        assert tags.merge(None, None) == {}

    def test_ignore_aws(self):
        """System tags are dropped."""
        assert tags.ignore_aws({"aws:cloudformation:stack-name": "x", "env": "prod"}) == {
            "env": "prod"
        }

    def test_ignore_config(self):
        """Configured keys and key prefixes are dropped."""
        config = IgnoreTagsConfig(keys=frozenset({"owner"}), key_prefixes=("kubernetes.io/",))
        result = tags.ignore_config(
            {"owner": "me", "kubernetes.io/cluster": "c", "env": "prod"}, config
        )
        assert result == {"env": "prod"}

    def test_ignore_config_none(self):
        """No ignore config keeps everything."""
        assert tags.ignore_config({"a": "b"}, None) == {"a": "b"}

    def test_remove_default_config(self):
        """Tags equal to a default are dropped; overridden defaults stay."""
        result = tags.remove_default_config(
            {"team": "db", "env": "prod", "app": "x"}, {"team": "db", "env": "dev"}
        )
        assert result == {"env": "prod", "app": "x"}


class TestDiff:
    """Tests for removed() and updated()."""

    def test_removed(self):
        """Keys gone from the new map are removed."""
        assert tags.removed({"a": "1", "b": "2"}, {"a": "9"}) == {"b": "2"}

    def test_updated(self):
        """New keys and changed values are updated."""
        assert tags.updated({"a": "1", "b": "2"}, {"a": "9", "b": "2", "c": "3"}) == {
            "a": "9",
            "c": "3",
        }


class TestApiShape:
    """Tests for from_api() and to_api()."""

    def test_to_api_sorted(self):
        """Tags render as a key-sorted Key/Value list."""
        assert tags.to_api({"b": "2", "a": "1"}) == [
            {"Key": "a", "Value": "1"},
            {"Key": "b", "Value": "2"},
        ]

    def test_from_api(self):
        """Tag lists parse into a map; a missing value is empty."""
        assert tags.from_api([{"Key": "a", "Value": "1"}, {"Key": "b"}]) == {"a": "1", "b": ""}
        assert tags.from_api(None) == {}
