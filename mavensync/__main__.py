import sys

from mavensync.main import main

sys.exit(main())
