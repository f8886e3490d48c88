"""Static site generation for the public club pages."""
