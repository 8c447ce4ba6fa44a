import unittest

from padconf.aggregator import aggregate
from padconf.registry import (
    ConfigurationError,
    FormatterOptions,
    KeyedFormatters,
    RegistryBuilder,
)


def build(table):
    return RegistryBuilder.from_table(table).build()


class TestParsers(unittest.TestCase):

    def test_default_parser_is_the_filetype(self):
        result = build({"markdown": {}, "sh": {"parser": "bash"}})
        self.assertIn("markdown", result.parser_installs)
        self.assertIn("bash", result.parser_installs)
        self.assertNotIn("sh", result.parser_installs)

    def test_other_is_never_a_parser(self):
        result = build({"other": {"tools": {"harper-ls": {}}}, "lua": {}})
        self.assertNotIn("other", result.parser_installs)
        self.assertIn("harper-ls", result.tool_packages)

    def test_parsers_are_unique(self):
        result = build({"sh": {"parser": "bash"}, "bash": {}, "zsh": {"parser": "bash"}})
        self.assertEqual(result.parser_installs.count("bash"), 1)

    def test_non_string_parser_is_an_error(self):
        with self.assertRaises(ConfigurationError):
            build({"sh": {"parser": ["bash"]}})


class TestFormatters(unittest.TestCase):

    def test_order_is_preserved(self):
        result = build({"typescript": {"formatters": ["a", "b", "c"]}})
        self.assertEqual(result.formatters_by_filetype["typescript"], ("a", "b", "c"))

    def test_keyed_order_is_preserved(self):
        result = build({"web": {"formatters": {"eslint_d": {}, "prettierd": {}}}})
        self.assertEqual(result.formatters_for("web"), ("eslint_d", "prettierd"))

    def test_install_flag_adds_tool_package(self):
        result = build({"css": {"formatters": {"toolX": {"install": True}}}})
        self.assertIn("toolX", result.tool_packages)
        self.assertEqual(result.tool_packages["toolX"], {})

    def test_install_false_does_not_add_tool_package(self):
        result = build({
            "css": {"formatters": {"toolY": {"install": False}}},
            "html": {"formatters": {"toolZ": {}}},
        })
        self.assertNotIn("toolY", result.tool_packages)
        self.assertNotIn("toolZ", result.tool_packages)
        self.assertEqual(result.formatters_for("css"), ("toolY",))

    def test_install_flag_keeps_existing_options(self):
        result = build({"lua": {
            "tools": {"stylua": {"version": "0.20"}},
            "formatters": {"stylua": {"install": True}},
        }})
        self.assertEqual(result.tool_packages["stylua"], {"version": "0.20"})

    def test_props_recorded_as_formatter_options(self):
        result = build({"sql": {"formatters": {"sqlfmt": {"props": {"args": ["-"]}}}}})
        self.assertEqual(result.formatter_options["sqlfmt"], {"args": ["-"]})
        self.assertNotIn("sqlfmt", result.tool_packages)

    def test_alias_value_is_appended(self):
        result = build({"json": {"formatters": {"fmt": "prettierd"}}})
        self.assertEqual(result.formatters_for("json"), ("prettierd",))

    def test_empty_chain_gives_empty_list(self):
        result = build({"ruby": {"formatters": {}}})
        self.assertEqual(result.formatters_by_filetype["ruby"], ())

    def test_no_chain_gives_no_entry(self):
        result = build({"sql": {}})
        self.assertNotIn("sql", result.formatters_by_filetype)

    def test_non_string_list_element_is_a_type_error(self):
        with self.assertRaises(TypeError) as ctx:
            build({"rust": {"formatters": [42]}})
        self.assertIsInstance(ctx.exception, ConfigurationError)
        self.assertIn("rust", str(ctx.exception))
        self.assertIn("int", str(ctx.exception))

    def test_bad_keyed_value_is_a_type_error(self):
        with self.assertRaises(ConfigurationError) as ctx:
            build({"kdl": {"formatters": {"kdlfmt": 3}}})
        self.assertEqual(ctx.exception.filetype, "kdl")

    def test_mapping_at_list_position_names_declared_type(self):
        with self.assertRaises(ConfigurationError) as ctx:
            build({"kdl": {"formatters": {1: {"install": True}}}})
        self.assertIn("got: dict", str(ctx.exception))
        self.assertNotIn("FormatterOptions", str(ctx.exception))

    def test_mixed_keyed_chain_keeps_author_order(self):
        builder = RegistryBuilder()
        builder.register("astro").with_formatters(KeyedFormatters((
            (1, "eslint_d"),
            ("prettierd", FormatterOptions(install=True)),
        )))
        result = builder.build()
        self.assertEqual(result.formatters_for("astro"), ("eslint_d", "prettierd"))
        self.assertIn("prettierd", result.tool_packages)

    def test_duplicates_keep_last_position(self):
        builder = RegistryBuilder()
        builder.register("ts").with_formatters(KeyedFormatters((
            (1, "prettierd"),
            (2, "eslint_d"),
            ("prettierd", FormatterOptions(install=True)),
        )))
        with self.assertLogs("padconf.aggregator", level="WARNING"):
            result = builder.build()
        self.assertEqual(result.formatters_for("ts"), ("eslint_d", "prettierd"))
        self.assertIn("prettierd", result.tool_packages)


class TestUnion(unittest.TestCase):

    def test_last_write_wins_for_tools_and_servers(self):
        result = build({
            "a": {"tools": {"shared": {"v": 1}}, "servers": {"srv": {"v": 1}}},
            "b": {"tools": {"shared": {"v": 2}}, "servers": {"srv": {"v": 2}}},
        })
        self.assertEqual(result.tool_packages["shared"], {"v": 2})
        self.assertEqual(result.server_configs["srv"], {"v": 2})

    def test_non_mapping_tools_is_an_error(self):
        with self.assertRaises(ConfigurationError):
            build({"a": {"tools": ["shellcheck"]}})

    def test_error_aborts_whole_aggregation(self):
        builder = RegistryBuilder.from_table({
            "good": {"tools": {"x": {}}},
            "bad": {"formatters": [None]},
        })
        with self.assertRaises(ConfigurationError):
            aggregate(builder.entries())

    def test_aggregate_is_read_only_and_detached(self):
        tools = {"x": {"opt": 1}}
        result = build({"a": {"tools": tools}})
        with self.assertRaises(TypeError):
            result.tool_packages["y"] = {}
        tools["x"]["opt"] = 2
        self.assertEqual(result.tool_packages["x"], {"opt": 1})

    def test_ensure_installed_is_sorted(self):
        result = build({"a": {"tools": {"zeta": {}, "alpha": {}}}})
        self.assertEqual(result.ensure_installed, ("alpha", "zeta"))

    def test_to_dict_is_plain(self):
        result = build({"rust": {"formatters": ["rustfmt"]}})
        data = result.to_dict()
        self.assertEqual(data["formatters_by_filetype"], {"rust": ["rustfmt"]})
        self.assertEqual(data["parser_installs"], ["rust"])


if __name__ == '__main__':
    unittest.main()
