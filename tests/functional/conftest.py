from fixtures.api import *  # noqa: F401, F403
from fixtures.assets import *  # noqa: F401, F403
from fixtures.service import *  # noqa: F401, F403
from fixtures.storage import *  # noqa: F401, F403
