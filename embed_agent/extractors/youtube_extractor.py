#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
YouTube Extractor Module

Video extractor for YouTube. Metadata comes from the public oEmbed endpoint;
the embed is a self-contained document that lazily loads the IFrame Player
API, forwards player events to the host and accepts host commands.
"""

import json
from string import Template
from typing import Dict, Any, Optional

from embed_agent.core.models import Author, ContentType, EmbedMetadata, Platform, RenderOptions
from embed_agent.extractors.oembed_extractor import OEmbedExtractor, parse_dimension
from embed_agent.extractors.player import transitions_as_json
from embed_agent.utils.html_utils import (
    PLAY_ICON, aspect_ratio_padding, escape_html, get_theme, render_link_card,
)

THUMBNAIL_BASE = 'https://img.youtube.com/vi'
EMBED_BASE = 'https://www.youtube.com/embed'
IFRAME_API_URL = 'https://www.youtube.com/iframe_api'

DEFAULT_WIDTH = 560
DEFAULT_HEIGHT = 315


def get_thumbnail_url(video_id: str, quality: str = 'hqdefault') -> str:
    return f"{THUMBNAIL_BASE}/{video_id}/{quality}.jpg"


def get_embed_url(video_id: str) -> str:
    return f"{EMBED_BASE}/{video_id}"


def _script_json(value: Any) -> str:
    # Keeps "</script>" sequences out of inline script blocks
    return json.dumps(value).replace('</', '<\\/')


PLAYER_DOCUMENT = Template("""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0, maximum-scale=1.0, user-scalable=no">
  <title>$title</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: $background; color: $text; }
    .youtube-embed { position: relative; width: 100%; max-width: ${width}px; margin: 0 auto; }
    .video-container { position: relative; width: 100%; height: 0; padding-bottom: $padding; overflow: hidden; background: #000; border-radius: 8px; }
    .video-container #player, .video-container iframe, .video-overlay { position: absolute; top: 0; left: 0; width: 100%; height: 100%; border: none; }
    .video-overlay { cursor: pointer; background: #000 center / cover no-repeat; }
    .video-overlay img { width: 100%; height: 100%; object-fit: cover; display: block; }
    .play-button { position: absolute; top: 50%; left: 50%; transform: translate(-50%, -50%); width: 68px; height: 48px; border: none; border-radius: 12px; background: rgba(255, 0, 0, 0.9); display: flex; align-items: center; justify-content: center; cursor: pointer; }
    .video-title { margin-top: 8px; font-weight: bold; }
    .video-author { margin-top: 4px; color: $muted; font-size: 14px; }
  </style>
</head>
<body>
  <div class="youtube-embed">
    <div class="video-container">
      <div id="player"></div>
      <div class="video-overlay" id="overlay" role="button" aria-label="Play video">
        $thumbnail
        <button class="play-button" type="button" aria-label="Play">$play_icon</button>
      </div>
    </div>
    $caption
  </div>
  <script>
    (function () {
      var VIDEO_ID = $video_id;
      var AUTOPLAY = $autoplay;
      var CONTROLS = $controls;
      var TRANSITIONS = $transitions;
      var API_URL = $api_url;
      var YT_STATES = { '0': 'ended', '1': 'playing', '2': 'paused', '5': 'ready' };

      var player = null;
      var state = 'uninitialized';

      function post(message) {
        var payload = JSON.stringify(message);
        if (window.ReactNativeWebView && window.ReactNativeWebView.postMessage) {
          window.ReactNativeWebView.postMessage(payload);
        } else if (window.parent && window.parent !== window) {
          window.parent.postMessage(payload, '*');
        }
      }

      function transition(next, detail) {
        var allowed = TRANSITIONS[state] || [];
        if (allowed.indexOf(next) === -1) {
          return false;
        }
        var message = { type: 'player', event: 'statechange', state: next, previous: state, videoId: VIDEO_ID };
        state = next;
        if (detail) {
          for (var key in detail) {
            if (Object.prototype.hasOwnProperty.call(detail, key)) {
              message[key] = detail[key];
            }
          }
        }
        post(message);
        return true;
      }

      function onPlayerReady(event) {
        transition('ready');
        post({ type: 'player', event: 'ready', videoId: VIDEO_ID, duration: event.target.getDuration() });
        event.target.playVideo();
      }

      function onPlayerStateChange(event) {
        var next = YT_STATES[String(event.data)];
        if (next) {
          transition(next, { currentTime: event.target.getCurrentTime() });
        }
      }

      function onPlayerError(event) {
        transition('error', { code: event.data });
        post({ type: 'player', event: 'error', videoId: VIDEO_ID, code: event.data });
      }

      function createPlayer() {
        player = new YT.Player('player', {
          videoId: VIDEO_ID,
          width: '100%',
          height: '100%',
          playerVars: { autoplay: 1, controls: CONTROLS ? 1 : 0, rel: 0, modestbranding: 1, playsinline: 1 },
          events: { onReady: onPlayerReady, onStateChange: onPlayerStateChange, onError: onPlayerError }
        });
        transition('player-created');
        document.getElementById('overlay').style.display = 'none';
      }

      function loadApi() {
        if (state !== 'uninitialized') {
          return;
        }
        transition('loading-api');
        if (window.YT && window.YT.Player) {
          createPlayer();
          return;
        }
        window.onYouTubeIframeAPIReady = createPlayer;
        var tag = document.createElement('script');
        tag.src = API_URL;
        tag.onerror = function () {
          transition('error', { code: 'api-load-failed' });
          post({ type: 'player', event: 'error', videoId: VIDEO_ID, code: 'api-load-failed' });
        };
        document.head.appendChild(tag);
      }

      var api = {
        play: function () { if (player && player.playVideo) { player.playVideo(); } },
        pause: function () { if (player && player.pauseVideo) { player.pauseVideo(); } },
        stop: function () {
          if (player && player.stopVideo) {
            player.stopVideo();
            transition('player-created');
          }
        },
        seek: function (seconds) { if (player && player.seekTo) { player.seekTo(Number(seconds) || 0, true); } },
        setVolume: function (level) {
          if (player && player.setVolume) {
            player.setVolume(Math.max(0, Math.min(100, Number(level) || 0)));
          }
        },
        getState: function () { return state; },
        getCurrentTime: function () { return player && player.getCurrentTime ? player.getCurrentTime() : 0; },
        getDuration: function () { return player && player.getDuration ? player.getDuration() : 0; }
      };
      window.embedPlayer = api;

      function handleCommand(raw) {
        var command = raw;
        if (typeof raw === 'string') {
          try { command = JSON.parse(raw); } catch (e) { return; }
        }
        if (!command || typeof command.type !== 'string') {
          return;
        }
        switch (command.type) {
          case 'play': api.play(); break;
          case 'pause': api.pause(); break;
          case 'stop': api.stop(); break;
          case 'seek': api.seek(command.seconds); break;
          case 'setVolume': api.setVolume(command.level); break;
          case 'getState':
            post({ type: 'player', event: 'state', videoId: VIDEO_ID, state: api.getState(),
                   currentTime: api.getCurrentTime(), duration: api.getDuration() });
            break;
        }
      }

      window.addEventListener('message', function (event) { handleCommand(event.data); });
      document.addEventListener('message', function (event) { handleCommand(event.data); });
      document.getElementById('overlay').addEventListener('click', loadApi);

      if (AUTOPLAY) {
        loadApi();
      }
    })();
  </script>
</body>
</html>
""")


class YouTubeExtractor(OEmbedExtractor):
    """
    Extractor for YouTube videos.

    Always attaches embed data (video id and player URL), so the embed can
    be played in-app even when oEmbed is unavailable.
    """

    platform = Platform.YOUTUBE
    endpoint = 'https://www.youtube.com/oembed'
    provider_name = 'YouTube'
    provider_url = 'https://youtube.com'

    def build_metadata(self, content_id: str, url: str, payload: Dict[str, Any]) -> EmbedMetadata:
        title = payload['title']
        author_name = payload.get('author_name')
        description = f'Watch "{title}" by {author_name}' if author_name else f'Watch "{title}" on YouTube'

        return EmbedMetadata(
            url=url,
            platform=Platform.YOUTUBE,
            type=ContentType.VIDEO,
            title=title,
            description=description,
            image=payload.get('thumbnail_url') or get_thumbnail_url(content_id),
            width=parse_dimension(payload.get('width')),
            height=parse_dimension(payload.get('height')),
            author=Author(name=author_name, url=payload.get('author_url')),
            provider=self.build_provider(),
            embed_data=self._embed_data(content_id),
        )

    def build_fallback_metadata(self, content_id: str, url: str) -> EmbedMetadata:
        return EmbedMetadata(
            url=url,
            platform=Platform.YOUTUBE,
            type=ContentType.VIDEO,
            title='YouTube Video',
            description='Watch this video on YouTube',
            image=get_thumbnail_url(content_id),
            width=DEFAULT_WIDTH,
            height=DEFAULT_HEIGHT,
            provider=self.build_provider(),
            embed_data=self._embed_data(content_id),
        )

    def generate_embed(self, metadata: EmbedMetadata, options: Optional[RenderOptions] = None) -> str:
        """
        Render an interactive player document, or a link card without embed data.

        Args:
            metadata: YouTube metadata
            options: Render options

        Returns:
            HTML document or fragment
        """
        options = options or RenderOptions()
        embed_data = metadata.embed_data or {}
        video_id = embed_data.get('videoId')

        if not video_id or not embed_data.get('embedUrl'):
            return render_link_card(metadata, options, provider_label='YouTube', play_badge=True)

        width = options.width or metadata.width or DEFAULT_WIDTH
        height = options.height or metadata.height or DEFAULT_HEIGHT
        theme = get_theme(options.theme)
        title = escape_html(metadata.title or 'YouTube Video')

        thumbnail = ''
        if metadata.image:
            thumbnail = f'<img src="{escape_html(metadata.image)}" alt="{title}">'

        caption = ''
        if metadata.title:
            caption += f'<div class="video-title">{title}</div>'
        if metadata.author and metadata.author.name:
            caption += f'<div class="video-author">by {escape_html(metadata.author.name)}</div>'

        return PLAYER_DOCUMENT.substitute(
            title=title,
            background=theme['background'],
            text=theme['title'],
            muted=theme['muted'],
            width=width,
            padding=aspect_ratio_padding(width, height),
            thumbnail=thumbnail,
            play_icon=PLAY_ICON,
            caption=caption,
            video_id=_script_json(video_id),
            autoplay=_script_json(bool(options.autoplay)),
            controls=_script_json(bool(options.controls)),
            transitions=transitions_as_json().replace('</', '<\\/'),
            api_url=_script_json(IFRAME_API_URL),
        )

    def _embed_data(self, video_id: str) -> Dict[str, str]:
        return {'videoId': video_id, 'embedUrl': get_embed_url(video_id)}
