import sys

from protoc_connect.main import main

sys.exit(main())
