from .user import User  # noqa: F401
from .settings import UserSettings  # noqa: F401
from .taxon import Taxon, TaxonName  # noqa: F401
from .observation import Observation  # noqa: F401
from .identification import Identification  # noqa: F401
from .comment import Comment  # noqa: F401
from .post import Post  # noqa: F401
from .listed_taxon import List, ListedTaxon  # noqa: F401
from .observation_link import ObservationLink  # noqa: F401

from .update import Update  # noqa: F401
