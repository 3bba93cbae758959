"""
gigslots - Booking slot and availability calendar logic for gig freelancers.
"""

__version__ = "0.1.0"
