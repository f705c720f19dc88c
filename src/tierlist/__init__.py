"""Tiered ranked-list maintenance.

Layout of the data directory:
    levels_main.json        # Top tier, ranks 1-75 (items carry position history)
    levels_extended.json    # Mid tier, ranks 76-150
    levels_legacy.json      # Overflow tier, ranks 151+
    README.md               # "Latest changes" block
    CHANGELOG.md            # One line per committed operation
    *.batch_temp            # Snapshots while a batch session is active
"""
