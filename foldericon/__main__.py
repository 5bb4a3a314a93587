"""Allow ``python -m foldericon``."""

from foldericon import main

main()
