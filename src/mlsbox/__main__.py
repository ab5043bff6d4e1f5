import sys

from mlsbox.main import main

sys.exit(main())
