import sys

from chipjax.cli import main

sys.exit(main())
