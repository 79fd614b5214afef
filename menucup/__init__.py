"""
                        MenuCup

Multi-tenant digital menu builder: owners curate categories and
items from a dashboard, guests browse a themed public menu.

Author: Khalil_Bannouri
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Khalil_Bannouri"
