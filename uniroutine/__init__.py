"""
uniroutine - extract university class routines from the routine page into JSON.
"""
