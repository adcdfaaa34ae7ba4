"""SheetSeek: index spreadsheet files and search their cells over HTTP."""
