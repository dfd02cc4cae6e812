"""pacecast: forecast when a level ladder will be finished."""
