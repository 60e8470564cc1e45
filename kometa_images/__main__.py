import sys

from .create_images import main

sys.exit(main())
