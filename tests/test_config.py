import json
import os
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest import mock

from base_encoding import (
    BASE_16,
    BASE_32,
    BASE_32_HEX,
    BASE_64,
    BASE_64_URL,
    CodecConfig,
    InvalidConfigurationError,
    load_config,
    log_event,
    lookup,
    registry,
    save_config,
)
from base_encoding.config import ENV_MAPPING
from base_encoding.history import format_record, read_history
from base_encoding.utils import decode_bytes_best_effort, unescape


def clean_env():
    patcher = mock.patch.dict(os.environ)
    patcher.start()
    for env_var in ENV_MAPPING.values():
        os.environ.pop(env_var, None)
    return patcher


class TestRegistry(unittest.TestCase):
    def test_registry_names(self) -> None:
        self.assertEqual(
            registry(),
            {
                "base16": BASE_16,
                "base32": BASE_32,
                "base32hex": BASE_32_HEX,
                "base64": BASE_64,
                "base64url": BASE_64_URL,
            },
        )

    def test_lookup_spellings(self) -> None:
        self.assertIs(lookup("base64url"), BASE_64_URL)
        self.assertIs(lookup("Base64-URL"), BASE_64_URL)
        self.assertIs(lookup("BASE_32_HEX"), BASE_32_HEX)
        self.assertIs(lookup(" base16 "), BASE_16)

    def test_lookup_unknown(self) -> None:
        with self.assertRaises(InvalidConfigurationError):
            lookup("base58")


class TestCodecConfig(unittest.TestCase):
    def setUp(self) -> None:
        self.env = clean_env()
        self.tmpdir = TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "settings.json"

    def tearDown(self) -> None:
        self.tmpdir.cleanup()
        self.env.stop()

    def test_defaults_when_missing(self) -> None:
        config = load_config(self.path)
        self.assertEqual(config, CodecConfig())
        self.assertEqual(config.build(), BASE_64)

    def test_save_and_reload(self) -> None:
        config = CodecConfig(variant="base32", omit_padding=True, separator="\n", interval=8)
        save_config(config, self.path)
        reloaded = load_config(self.path)
        self.assertEqual(reloaded, config)
        self.assertEqual(reloaded.build(), BASE_32.without_padding().with_separator("\n", 8))

    def test_malformed_file_falls_back(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(load_config(self.path), CodecConfig())
        self.path.write_text(json.dumps({"variant": "base99"}), encoding="utf-8")
        self.assertEqual(load_config(self.path).variant, "base64")

    def test_unknown_keys_are_ignored(self) -> None:
        self.path.write_text(json.dumps({"variant": "base16", "colour": "blue"}), encoding="utf-8")
        self.assertEqual(load_config(self.path).build(), BASE_16)

    def test_from_dict_rejects_wrong_types(self) -> None:
        for data in (
            {"interval": "5"},
            {"interval": True},
            {"omit_padding": "no"},
            {"history": 0},
            {"separator": 10},
            {"variant": None},
        ):
            with self.assertRaises(InvalidConfigurationError):
                CodecConfig.from_dict(data)
        self.assertEqual(CodecConfig.from_dict({"interval": 5, "omit_padding": True}).interval, 5)

    def test_mistyped_file_falls_back(self) -> None:
        self.path.write_text(json.dumps({"separator": "\n", "interval": "5"}), encoding="utf-8")
        config = load_config(self.path)
        self.assertEqual(config, CodecConfig())
        self.assertEqual(config.build(), BASE_64)
        self.path.write_text(json.dumps({"omit_padding": "no"}), encoding="utf-8")
        self.assertFalse(load_config(self.path).build().omit_padding)

    def test_env_fills_defaults(self) -> None:
        os.environ["BASE_ENCODING_VARIANT"] = "base32hex"
        os.environ["BASE_ENCODING_SEPARATOR"] = "\\r\\n"
        os.environ["BASE_ENCODING_INTERVAL"] = "16"
        os.environ["BASE_ENCODING_IGNORE_UNKNOWN"] = "yes"
        os.environ["BASE_ENCODING_NO_HISTORY"] = "1"
        config = load_config(self.path)
        self.assertEqual(config.variant, "base32hex")
        self.assertEqual(config.separator, "\r\n")
        self.assertEqual(config.interval, 16)
        self.assertTrue(config.ignore_unknown)
        self.assertFalse(config.history)
        self.assertEqual(
            config.build(),
            BASE_32_HEX.ignore_unknown_characters().with_separator("\r\n", 16),
        )

    def test_file_values_win_over_env(self) -> None:
        save_config(CodecConfig(variant="base16"), self.path)
        os.environ["BASE_ENCODING_VARIANT"] = "base32"
        self.assertEqual(load_config(self.path).variant, "base16")

    def test_bad_env_interval(self) -> None:
        os.environ["BASE_ENCODING_INTERVAL"] = "often"
        with self.assertRaises(InvalidConfigurationError):
            load_config(self.path)

    def test_build_validates(self) -> None:
        with self.assertRaises(InvalidConfigurationError):
            CodecConfig(separator="\n").build()
        with self.assertRaises(InvalidConfigurationError):
            CodecConfig(variant="base64", separator="+", interval=4).build()
        with self.assertRaises(InvalidConfigurationError):
            CodecConfig(alphabet="ABC").build()

    def test_custom_alphabet(self) -> None:
        config = CodecConfig(alphabet="fedcba9876543210")
        encoding = config.build()
        self.assertEqual(encoding.encode(b"\x01\xfe"), "fe01")
        self.assertEqual(encoding.decode("fe01"), b"\x01\xfe")


class TestHistory(unittest.TestCase):
    def test_log_event_appends_lines(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "history.jsonl"
            log_event("encode", {"variant": "base64", "input_size": 3}, path=path)
            log_event("decode", {"variant": "base32"}, path=path)
            records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        self.assertEqual(records[0], {"action": "encode", "variant": "base64", "input_size": 3})
        self.assertEqual(records[1]["action"], "decode")

    def test_read_history(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "history.jsonl"
            self.assertEqual(read_history(path), [])
            for size in range(3):
                log_event("encode", {"input_size": size}, path=path)
            with path.open("a", encoding="utf-8") as fh:
                fh.write("{broken\n[1, 2]\n")
            log_event("decode", {"input_size": 9, "separator": None}, path=path)
            records = read_history(path)
            recent = read_history(path, limit=2)
        self.assertEqual([r["action"] for r in records], ["encode", "encode", "encode", "decode"])
        self.assertEqual([r["input_size"] for r in recent], [2, 9])
        self.assertEqual(format_record(recent[1]), "decode     input_size=9")

    def test_log_event_never_raises(self) -> None:
        with TemporaryDirectory() as tmpdir:
            log_event("encode", {}, path=Path(tmpdir))


class TestUtils(unittest.TestCase):
    def test_decode_bytes_best_effort(self) -> None:
        self.assertEqual(decode_bytes_best_effort("hé".encode("utf-8")), "hé")
        self.assertEqual(decode_bytes_best_effort("hé".encode("cp1252"), preferred_encoding="cp1252"), "hé")
        self.assertEqual(decode_bytes_best_effort(b"\xff", encodings=["ascii"]), "�")

    def test_unescape(self) -> None:
        self.assertEqual(unescape("\\n"), "\n")
        self.assertEqual(unescape("--"), "--")
        with self.assertRaises(InvalidConfigurationError):
            unescape("\\")


if __name__ == "__main__":
    unittest.main()
