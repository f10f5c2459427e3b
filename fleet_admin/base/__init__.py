# (c) Nelen & Schuurmans
