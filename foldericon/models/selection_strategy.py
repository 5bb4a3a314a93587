"""
Enums for the icon candidate selection chain.

The selection chain is evaluated in this order for every folder:
1. Dependency - exact folder name lookup in a caller-supplied table
2. Token - a whitespace token of the normalized name found in an executable name
3. Icon Priority - an .ico file found under the caller-selected priority mode
4. Fuzzy - loose matching of every executable name against the folder name
"""

from enum import Enum


class SelectionStrategy(Enum):
    """Records which strategy of the selection chain produced a candidate."""
    DEPENDENCY = "dependency"          # Step 1: Folder name mapped to a file name
    TOKEN = "token"                    # Step 2: Name token contained in an executable name
    ICON_PRIORITY = "icon_priority"    # Step 3: Icon file found under the priority mode
    FUZZY = "fuzzy"                    # Step 4: Loose executable name match


class PriorityMode(Enum):
    """Icon file search policy. Exactly one mode is evaluated per folder."""
    ICON_ICO = "icon.ico"              # Literal icon.ico directly inside the folder
    LIKE_FOLDER = "like_folder"        # <normalized folder name>.ico anywhere in the tree
    ANY = "any"                        # Any .ico file anywhere in the tree
