"""Priors Survey: participant slot allocation and slider-rating trials."""
