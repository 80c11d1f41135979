"""FAT on-disk structures and sector-addressed storage devices."""