"""Campus signage: widget layout and configuration engine."""
