from gigmarket.models.user import User
from gigmarket.models.gig import Gig
from gigmarket.models.bid import Bid

__all__ = ["User", "Gig", "Bid"]
