"""
Unit tests for sandboxfs configuration
"""

import unittest
import tempfile
import os
import sys
import shutil
from pathlib import Path
from unittest.mock import patch

import yaml

# Add sandboxfs to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sandboxfs.config import SandboxConfig, load_config, CONFIG_ENV_VAR
from sandboxfs.core.filesystem import HostFileSystem, DEFAULT_WORK_DIR_NAME
from sandboxfs.exceptions import ConfigError
from sandboxfs.flags import DARWIN_FLAGS


class TestSandboxConfig(unittest.TestCase):
    """Test configuration loading and validation"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp(prefix='sandboxfs_config_')
        self.config_file = os.path.join(self.test_dir, 'config.yaml')
        # Keep the user's own config files out of the tests
        self.env = patch.dict(os.environ, {CONFIG_ENV_VAR: self.config_file})
        self.env.start()
        self.home = patch('pathlib.Path.home', return_value=Path(self.test_dir))
        self.home.start()

    def tearDown(self):
        self.home.stop()
        self.env.stop()
        if os.path.exists(self.test_dir):
            shutil.rmtree(self.test_dir)

    def _write(self, data):
        with open(self.config_file, 'w') as f:
            yaml.safe_dump(data, f)

    def test_defaults(self):
        config = SandboxConfig()
        self.assertIsNone(config.root_dir)
        self.assertEqual(config.abi, 'linux')
        self.assertEqual(config.work_dir_name, DEFAULT_WORK_DIR_NAME)
        self.assertEqual(config.log_level, 'INFO')

    def test_load_from_file(self):
        root = os.path.join(self.test_dir, 'sbx')
        self._write({'root_dir': root, 'abi': 'Darwin', 'work_dir_name': 'scratch', 'log_level': 'debug'})
        config = load_config(self.config_file)
        self.assertEqual(config.root_dir, Path(root))
        self.assertEqual(config.abi, 'darwin')
        self.assertEqual(config.work_dir_name, 'scratch')
        self.assertEqual(config.log_level, 'DEBUG')

    def test_load_from_env_location(self):
        self._write({'abi': 'ios'})
        self.assertEqual(load_config().abi, 'ios')

    @unittest.skipIf(os.path.exists('/etc/sandboxfs/config.yaml'), 'system config present')
    def test_no_config_file_gives_defaults(self):
        config = load_config()
        self.assertIsNone(config.root_dir)

    def test_overrides_win(self):
        self._write({'abi': 'darwin'})
        config = load_config(self.config_file, abi='linux', root_dir=None)
        self.assertEqual(config.abi, 'linux')
        self.assertIsNone(config.root_dir)

    def test_root_dir_is_expanded(self):
        config = SandboxConfig(root_dir='~/sbx')
        self.assertTrue(config.root_dir.is_absolute())
        self.assertNotIn('~', str(config.root_dir))

    def test_empty_file(self):
        with open(self.config_file, 'w') as f:
            f.write('')
        self.assertEqual(load_config(self.config_file).abi, 'linux')

    def test_invalid_values(self):
        for data in ({'abi': 'windows'}, {'work_dir_name': '../escape'},
                     {'work_dir_name': ''}, {'log_level': 'LOUD'}):
            self._write(data)
            with self.assertRaises(ConfigError, msg=str(data)):
                load_config(self.config_file)

    def test_non_mapping(self):
        with open(self.config_file, 'w') as f:
            f.write('- just\n- a list\n')
        with self.assertRaises(ConfigError):
            load_config(self.config_file)

    def test_bad_yaml(self):
        with open(self.config_file, 'w') as f:
            f.write('abi: [unclosed\n')
        with self.assertRaises(ConfigError):
            load_config(self.config_file)

    def test_missing_explicit_file(self):
        with self.assertRaises(ConfigError):
            load_config(os.path.join(self.test_dir, 'nope.yaml'))

    def test_filesystem_from_config(self):
        root = os.path.join(self.test_dir, 'sbx')
        config = SandboxConfig(root_dir=root, abi='darwin', work_dir_name='scratch')
        fs = HostFileSystem.from_config(config, context='emulator')
        self.assertEqual(fs.get_root_dir(), Path(root))
        self.assertIs(fs.flags, DARWIN_FLAGS)
        self.assertEqual(fs.context, 'emulator')
        self.assertEqual(fs.create_work_dir(), Path(root) / 'scratch')


if __name__ == '__main__':
    unittest.main()
