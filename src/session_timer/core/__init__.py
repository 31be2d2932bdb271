"""Session Timer core: clock, recorder, persistence and summaries."""
