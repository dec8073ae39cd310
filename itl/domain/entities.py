from __future__ import annotations

import html
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from .errors import FieldAccessError, NotFound
from .schema import (
    FieldKind,
    accessor_table,
    data,
    find_field,
    flag,
    integer,
    list_of,
    mapping_of,
    text,
    timestamp,
)


def _getter(entity_type: type, name: str, kind: FieldKind) -> Callable[[Any], Any]:
    getter = accessor_table(entity_type, kind).get(name)
    if getter is not None:
        return getter
    spec = find_field(entity_type, name)
    if spec is None:
        raise FieldAccessError(f"invalid field: {name!r}")
    raise FieldAccessError(f"field {name!r} is {spec.kind.value}, not {kind.value}")


@dataclass(frozen=True)
class Track:
    """A media item in the library, either music or video.

    Tracks are identified by ``track_id``, which is also the key of the track
    in ``Library.tracks``.
    """

    track_id: int = integer("Track ID")
    persistent_id: str = text("Persistent ID")
    track_type: str = text("Track Type")
    location: str = text("Location")
    file_type: int = integer("File Type")
    kind: str = text("Kind")
    size: int = integer("Size")
    total_time: int = integer("Total Time")
    start_time: int = integer("Start Time")
    stop_time: int = integer("Stop Time")

    name: str = text("Name")
    artist: str = text("Artist")
    album_artist: str = text("Album Artist")
    composer: str = text("Composer")
    album: str = text("Album")
    grouping: str = text("Grouping")
    genre: str = text("Genre")
    comments: str = text("Comments")
    work: str = text("Work")
    movement_name: str = text("Movement Name")
    movement_number: int = integer("Movement Number")
    movement_count: int = integer("Movement Count")
    year: int = integer("Year")
    bpm: int = integer("BPM")

    sort_name: str = text("Sort Name")
    sort_artist: str = text("Sort Artist")
    sort_album_artist: str = text("Sort Album Artist")
    sort_album: str = text("Sort Album")
    sort_composer: str = text("Sort Composer")

    track_number: int = integer("Track Number")
    track_count: int = integer("Track Count")
    disc_number: int = integer("Disc Number")
    disc_count: int = integer("Disc Count")
    part_of_gapless_album: bool = flag("Part Of Gapless Album")
    compilation: bool = flag("Compilation")

    content_rating: str = text("Content Rating")
    clean: bool = flag("Clean")
    explicit: bool = flag("Explicit")

    rating: int = integer("Rating")
    rating_computed: bool = flag("Rating Computed")
    album_rating: int = integer("Album Rating")
    album_rating_computed: bool = flag("Album Rating Computed")
    loved: bool = flag("Loved")
    album_loved: bool = flag("Album Loved")
    disliked: bool = flag("Disliked")
    disabled: bool = flag("Disabled")

    bit_rate: int = integer("Bit Rate")
    sample_rate: int = integer("Sample Rate")
    volume_adjustment: int = integer("Volume Adjustment")
    normalization: int = integer("Normalization")
    artwork_count: int = integer("Artwork Count")

    play_count: int = integer("Play Count")
    # Seconds since 1904-01-01, as written by the exporting application.
    play_date: int = integer("Play Date")
    play_date_utc: Optional[datetime] = timestamp("Play Date UTC")
    skip_count: int = integer("Skip Count")
    skip_date: Optional[datetime] = timestamp("Skip Date")
    unplayed: bool = flag("Unplayed")

    date_modified: Optional[datetime] = timestamp("Date Modified")
    date_added: Optional[datetime] = timestamp("Date Added")
    release_date: Optional[datetime] = timestamp("Release Date")

    protected: bool = flag("Protected")
    purchased: bool = flag("Purchased")

    series: str = text("Series")
    episode: str = text("Episode")
    episode_order: int = integer("Episode Order")
    season: int = integer("Season")
    tv_show: bool = flag("TV Show")
    podcast: bool = flag("Podcast")
    itunes_u: bool = flag("iTunesU")

    movie: bool = flag("Movie")
    music_video: bool = flag("Music Video")
    hd: bool = flag("HD")
    has_video: bool = flag("Has Video")
    video_height: int = integer("Video Height")
    video_width: int = integer("Video Width")

    file_folder_count: int = integer("File Folder Count")
    library_folder_count: int = integer("Library Folder Count")

    def __str__(self) -> str:
        return self.name

    def get_string(self, name: str) -> str:
        """Return the text field ``name`` with HTML entities unescaped.

        ``name`` may be the field identifier or the document key. Raises
        ``FieldAccessError`` if the field does not exist or is not text.
        """
        return html.unescape(_getter(Track, name, FieldKind.TEXT)(self))

    def get_int(self, name: str) -> int:
        """Return the integer field ``name``; raises ``FieldAccessError`` on misuse."""
        return _getter(Track, name, FieldKind.INTEGER)(self)

    def get_bool(self, name: str) -> bool:
        """Return the boolean field ``name``; raises ``FieldAccessError`` on misuse."""
        return _getter(Track, name, FieldKind.BOOLEAN)(self)


@dataclass(frozen=True)
class PlaylistItem:
    """Reference to a track by identifier; resolve it through ``Library.tracks``."""

    track_id: int = integer("Track ID")


@dataclass(frozen=True)
class Playlist:
    """Ordered list of track references.

    ``parent_persistent_id`` links a playlist to its enclosing folder. The
    hierarchy is left for consumers to assemble.
    """

    name: str = text("Name")
    description: str = text("Description")
    master: bool = flag("Master")
    playlist_id: int = integer("Playlist ID")
    playlist_persistent_id: str = text("Playlist Persistent ID")
    parent_persistent_id: str = text("Parent Persistent ID")
    distinguished_kind: int = integer("Distinguished Kind")
    folder: bool = flag("Folder")
    visible: bool = flag("Visible")
    all_items: bool = flag("All Items")

    music: bool = flag("Music")
    movies: bool = flag("Movies")
    tv_shows: bool = flag("TV Shows")
    podcasts: bool = flag("Podcasts")
    audiobooks: bool = flag("Audiobooks")
    books: bool = flag("Books")
    itunes_u: bool = flag("iTunesU")
    purchased_music: bool = flag("Purchased Music")

    smart_info: Optional[bytes] = data("Smart Info")
    smart_criteria: Optional[bytes] = data("Smart Criteria")

    playlist_items: List[PlaylistItem] = list_of("Playlist Items", PlaylistItem)

    def __str__(self) -> str:
        return self.name

    @property
    def is_smart(self) -> bool:
        return self.smart_criteria is not None

    def track_ids(self) -> List[str]:
        """Identifiers of the referenced tracks, in playlist order, as ``Library.tracks`` keys."""
        return [str(item.track_id) for item in self.playlist_items]


@dataclass(frozen=True)
class Library:
    """Root library entity holding the track mapping and the playlist list."""

    major_version: int = integer("Major Version")
    minor_version: int = integer("Minor Version")
    date: Optional[datetime] = timestamp("Date")
    application_version: str = text("Application Version")
    features: int = integer("Features")
    show_content_ratings: bool = flag("Show Content Ratings")
    music_folder: str = text("Music Folder")
    library_persistent_id: str = text("Library Persistent ID")
    tracks: Dict[str, Track] = mapping_of("Tracks", Track)
    playlists: List[Playlist] = list_of("Playlists", Playlist)

    def track(self, track_id: Union[str, int]) -> Track:
        """Return the track with the given identifier, or raise ``NotFound``."""
        try:
            return self.tracks[str(track_id)]
        except KeyError:
            raise NotFound(f"no track with id: {track_id}") from None

    def all_tracks(self) -> List[Track]:
        """Return a new list with every track in the library."""
        return list(self.tracks.values())

    def playlist_tracks(self, playlist: Playlist) -> List[Track]:
        """Resolve a playlist's items to tracks; a dangling reference raises ``NotFound``."""
        return [self.track(track_id) for track_id in playlist.track_ids()]
