import os
import sys
import pytest


def _ensure_project_root_on_sys_path() -> None:
    here = os.path.dirname(__file__)
    project_root = os.path.abspath(os.path.join(here, "..", ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)


_ensure_project_root_on_sys_path()


SAMPLE_LIBRARY_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
    <key>Major Version</key><integer>1</integer>
    <key>Minor Version</key><integer>1</integer>
    <key>Date</key><date>2014-06-01T10:20:30Z</date>
    <key>Application Version</key><string>11.2.2</string>
    <key>Features</key><integer>5</integer>
    <key>Show Content Ratings</key><true/>
    <key>Music Folder</key><string>file:///Users/test/Music/iTunes/iTunes%20Media/</string>
    <key>Library Persistent ID</key><string>ABCDEF0123456789</string>
    <key>Tracks</key>
    <dict>
        <key>1001</key>
        <dict>
            <key>Track ID</key><integer>1001</integer>
            <key>Name</key><string>Rock &amp;amp; Roll</string>
            <key>Artist</key><string>Led Zeppelin</string>
            <key>Album</key><string>Led Zeppelin IV</string>
            <key>Genre</key><string>Rock</string>
            <key>Kind</key><string>MPEG audio file</string>
            <key>Size</key><integer>5432100</integer>
            <key>Total Time</key><integer>220000</integer>
            <key>Track Number</key><integer>4</integer>
            <key>Track Count</key><integer>8</integer>
            <key>Year</key><integer>1971</integer>
            <key>Date Modified</key><date>2013-02-03T04:05:06Z</date>
            <key>Date Added</key><date>2012-01-02T03:04:05Z</date>
            <key>Bit Rate</key><integer>320</integer>
            <key>Sample Rate</key><integer>44100</integer>
            <key>Play Count</key><integer>12</integer>
            <key>Play Date</key><integer>3482148923</integer>
            <key>Play Date UTC</key><date>2014-05-05T12:15:23Z</date>
            <key>Compilation</key><false/>
            <key>Purchased</key><true/>
            <key>Persistent ID</key><string>1A2B3C4D5E6F7A8B</string>
            <key>Track Type</key><string>File</string>
            <key>Location</key><string>file:///Users/test/Music/rock.mp3</string>
            <key>File Folder Count</key><integer>5</integer>
            <key>Library Folder Count</key><integer>1</integer>
        </dict>
        <key>1002</key>
        <dict>
            <key>Track ID</key><integer>1002</integer>
            <key>Name</key><string>Black Dog</string>
            <key>Artist</key><string>Led Zeppelin</string>
            <key>Album</key><string>Led Zeppelin IV</string>
            <key>Track Number</key><integer>1</integer>
            <key>Has Video</key><false/>
            <key>Skip Count</key><integer>2</integer>
            <key>Skip Date</key><date>2014-04-04T08:00:00Z</date>
            <key>Persistent ID</key><string>0F0E0D0C0B0A0908</string>
            <key>Unknown Future Key</key><string>ignored</string>
        </dict>
        <key>1003</key>
        <dict>
            <key>Track ID</key><integer>1003</integer>
            <key>Name</key><string>Concert Film</string>
            <key>Has Video</key><true/>
            <key>Movie</key><true/>
            <key>HD</key><true/>
            <key>Video Width</key><integer>1920</integer>
            <key>Video Height</key><integer>1080</integer>
        </dict>
    </dict>
    <key>Playlists</key>
    <array>
        <dict>
            <key>Name</key><string>Library</string>
            <key>Master</key><true/>
            <key>Playlist ID</key><integer>2001</integer>
            <key>Playlist Persistent ID</key><string>AAAA000000000001</string>
            <key>Visible</key><false/>
            <key>All Items</key><true/>
            <key>Playlist Items</key>
            <array>
                <dict><key>Track ID</key><integer>1001</integer></dict>
                <dict><key>Track ID</key><integer>1002</integer></dict>
                <dict><key>Track ID</key><integer>1003</integer></dict>
            </array>
        </dict>
        <dict>
            <key>Name</key><string>Music</string>
            <key>Playlist ID</key><integer>2002</integer>
            <key>Playlist Persistent ID</key><string>AAAA000000000002</string>
            <key>Distinguished Kind</key><integer>4</integer>
            <key>Music</key><true/>
            <key>All Items</key><true/>
            <key>Playlist Items</key>
            <array>
                <dict><key>Track ID</key><integer>1002</integer></dict>
                <dict><key>Track ID</key><integer>1001</integer></dict>
            </array>
        </dict>
        <dict>
            <key>Name</key><string>Classics</string>
            <key>Playlist ID</key><integer>2003</integer>
            <key>Playlist Persistent ID</key><string>AAAA000000000003</string>
            <key>Folder</key><true/>
            <key>All Items</key><true/>
        </dict>
        <dict>
            <key>Name</key><string>Recently Played</string>
            <key>Playlist ID</key><integer>2004</integer>
            <key>Playlist Persistent ID</key><string>AAAA000000000004</string>
            <key>Parent Persistent ID</key><string>AAAA000000000003</string>
            <key>All Items</key><true/>
            <key>Smart Info</key>
            <data>AQEAAwAAAAIAAAAZAAAAAAAAAAcAAAAB</data>
            <key>Smart Criteria</key>
            <data>U0xzdAABAAEAAAACAAAAAQAAAAAAAAAA</data>
            <key>Playlist Items</key>
            <array>
                <dict><key>Track ID</key><integer>1001</integer></dict>
            </array>
        </dict>
    </array>
</dict>
</plist>
"""

EMPTY_LIBRARY_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
    <key>Major Version</key><integer>1</integer>
    <key>Minor Version</key><integer>1</integer>
    <key>Application Version</key><string>12.0</string>
    <key>Tracks</key>
    <dict>
    </dict>
    <key>Playlists</key>
    <array>
    </array>
</dict>
</plist>
"""


@pytest.fixture
def sample_xml() -> bytes:
    return SAMPLE_LIBRARY_XML


@pytest.fixture
def empty_xml() -> bytes:
    return EMPTY_LIBRARY_XML


@pytest.fixture
def library(sample_xml):
    import io
    from itl.application.reader import read_from_xml

    return read_from_xml(io.BytesIO(sample_xml))


@pytest.fixture(autouse=True)
def _clear_itl_env():
    """Ensure ITL_* variables do not leak across tests."""
    keys = ['ITL_LIBRARY_PATH', 'ITL_LOG_LEVEL', 'ITL_LOG_FILE']
    backup = {k: os.environ.get(k) for k in keys}
    for k in keys:
        os.environ.pop(k, None)
    try:
        yield
    finally:
        for k, v in backup.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v
