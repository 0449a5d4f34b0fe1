"""Comic Site — webcomic catalog service (comics, pages, canvas content)."""
