"""
sandboxfs Test Suite
Unit tests for the sandboxed host filesystem
"""

import sys
import os
import logging

# Add sandboxfs to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Configure logging for tests
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
