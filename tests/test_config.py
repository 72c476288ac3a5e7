from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from jsxtv.config import TransformConfig, config_from_mapping, load_config
from jsxtv.errors import ConfigError
from jsxtv.main import build_language_registry


ERB = {
    'name': 'erb',
    'replace': {'format': '<%= ||%1|| %>'},
    'list': {
        'open': '<% ||%1||.each do |item| %>',
        'close': '<% end %>',
        'formatObjectProperty': '<%= item[:||%1||] %>',
        'formatPrimitive': '<%= item %>',
    },
    'control': {
        'ifTruthy': {'open': '<% if ||%1|| %>', 'close': '<% end %>'},
        'ifFalsy': {'open': '<% unless ||%1|| %>', 'close': '<% end %>'},
        'ifEqual': {'open': '<% if ||%1|| == ||%2|| %>', 'close': '<% end %>'},
        'ifNotEqual': {'open': '<% if ||%1|| != ||%2|| %>', 'close': '<% end %>'},
    },
}


class ConfigMappingTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = TransformConfig()
        self.assertEqual(config.language, 'handlebars')
        self.assertFalse(config.tidy_only)
        self.assertEqual(config.config_property, 'templateVars')
        self.assertEqual(config.context_prop, '__context__')

    def test_file_option_names(self) -> None:
        config = config_from_mapping(
            {
                'language': 'php',
                'tidyOnly': True,
                'inlineRuntime': True,
                'languageSpecs': 'my_languages:register',
                'configProperty': 'vars',
                'contextProp': 'depth',
            }
        )
        self.assertEqual(config.language, 'php')
        self.assertTrue(config.tidy_only)
        self.assertTrue(config.inline_runtime)
        self.assertEqual(config.language_specs, ['my_languages:register'])
        self.assertEqual(config.config_property, 'vars')
        self.assertEqual(config.context_prop, 'depth')

    def test_custom_language_options_merge(self) -> None:
        other = dict(ERB, name='eex')
        config = config_from_mapping({'customLanguage': ERB, 'customLanguages': [other]})
        self.assertEqual([table['name'] for table in config.custom_languages], ['erb', 'eex'])
        registry = build_language_registry(config)
        self.assertTrue(registry.has('erb'))
        self.assertTrue(registry.has('eex'))

    def test_unknown_option(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            config_from_mapping({'langauge': 'php'}, 'options.json')
        self.assertEqual(ctx.exception.code, 'CFG002')
        self.assertIn('langauge', ctx.exception.message)

    def test_flags_must_be_booleans(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            config_from_mapping({'tidyOnly': 'yes'})
        self.assertEqual(ctx.exception.code, 'CFG003')

    def test_language_specs_must_be_strings(self) -> None:
        for value in (5, [1], {'a': 'b'}):
            with self.subTest(value=value):
                with self.assertRaises(ConfigError) as ctx:
                    config_from_mapping({'languageSpecs': value}, 'options.json')
                self.assertEqual(ctx.exception.code, 'CFG003')
                self.assertIn('languageSpecs', ctx.exception.message)
        config = config_from_mapping({'languageSpecs': 'my_languages:register'})
        self.assertEqual(config.language_specs, ['my_languages:register'])

    def test_with_overrides_skips_none(self) -> None:
        config = TransformConfig(language='php').with_overrides(language=None, tidy_only=True)
        self.assertEqual(config.language, 'php')
        self.assertTrue(config.tidy_only)


class ConfigFileTests(unittest.TestCase):
    def write(self, directory: str, text: str) -> Path:
        path = Path(directory) / 'jsxtv.json'
        path.write_text(text, encoding='utf-8')
        return path

    def test_load_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self.write(tmpdir, json.dumps({'language': 'erb', 'customLanguages': [ERB]}))
            config = load_config(path)
        self.assertEqual(config.language, 'erb')
        self.assertEqual(build_language_registry(config).get('erb').name, 'erb')

    def test_load_config_errors(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            cases = {
                'missing': Path(tmpdir) / 'missing.json',
                'invalid json': self.write(tmpdir, '{language:'),
            }
            for label, path in cases.items():
                with self.subTest(label=label):
                    with self.assertRaises(ConfigError) as ctx:
                        load_config(path)
                    self.assertEqual(ctx.exception.code, 'CFG001')

            array_path = Path(tmpdir) / 'array.json'
            array_path.write_text('[]', encoding='utf-8')
            with self.assertRaises(ConfigError) as ctx:
                load_config(array_path)
            self.assertEqual(ctx.exception.code, 'CFG001')


if __name__ == '__main__':
    unittest.main()
