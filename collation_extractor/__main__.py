# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
