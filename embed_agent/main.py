#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Embed Agent Main Script

This script provides a command-line interface for the embed service:
metadata extraction, oEmbed generation and HTML rendering for one or more
URLs, or serving the HTTP API.
"""

import os
import sys
import logging
import json
import argparse
from typing import List, Dict, Any, Optional
from datetime import datetime

from tqdm import tqdm

from embed_agent.config import ConfigError, load_config
from embed_agent.core.embed_service import EmbedService
from embed_agent.core.exceptions import EmbedAgentError
from embed_agent.core.models import OEmbedOptions, RenderOptions

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger('embed_agent')


def setup_argparse() -> argparse.ArgumentParser:
    """
    Set up command-line argument parsing.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        description='Extract link preview metadata, oEmbed responses and embeddable HTML',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Add main arguments
    parser.add_argument('url', nargs='?', help='URL to process (or use a file with --url-file)')
    parser.add_argument('--url-file', help='File containing URLs to process (one per line)')
    parser.add_argument('--mode', choices=['extract', 'oembed', 'render'], default='extract',
                        help='Operation to run on each URL')
    parser.add_argument('-o', '--output', default='output', help='Output directory for results')

    # oEmbed options
    parser.add_argument('--maxwidth', type=int, help='Maximum embed width (oembed mode)')
    parser.add_argument('--maxheight', type=int, help='Maximum embed height (oembed mode)')

    # Render options
    parser.add_argument('--width', type=int, help='Embed width (render mode)')
    parser.add_argument('--height', type=int, help='Embed height (render mode)')
    parser.add_argument('--autoplay', action='store_true', help='Start playback immediately (render mode)')
    parser.add_argument('--no-controls', action='store_false', dest='controls',
                        help='Hide player controls (render mode)')
    parser.add_argument('--theme', choices=['light', 'dark'], default='light', help='Card theme (render mode)')

    # Server options
    parser.add_argument('--serve', action='store_true', help='Run the HTTP API instead of processing URLs')
    parser.add_argument('--host', help='Host to bind the HTTP API to (defaults to config)')
    parser.add_argument('--port', type=int, help='Port to bind the HTTP API to (defaults to config)')

    # Add other options
    parser.add_argument('--config', help='YAML configuration file')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose output')

    return parser


def setup_logging(config: Dict[str, Any], verbose: bool = False) -> None:
    """
    Configure root logging from the ``logging`` config section.

    Args:
        config: Application configuration
        verbose: Force DEBUG level
    """
    logging_config = config.get('logging', {})
    level = logging.DEBUG if verbose else getattr(logging, str(logging_config.get('level', 'INFO')).upper(), logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if logging_config.get('file'):
        handlers.append(logging.FileHandler(logging_config['file']))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def get_urls_from_file(filename: str) -> List[str]:
    """
    Read URLs from a file.

    Args:
        filename: Path to a file containing URLs (one per line)

    Returns:
        List of URLs
    """
    urls = []
    try:
        with open(filename, 'r') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#'):
                    urls.append(line)
    except OSError as e:
        logger.error(f"Error reading URL file: {e}")
        sys.exit(1)

    return urls


def process_url(service: EmbedService, url: str, args: argparse.Namespace) -> Dict[str, Any]:
    """
    Run the selected operation on a single URL.

    Args:
        service: Embed service
        url: URL to process
        args: Command-line arguments

    Returns:
        Result record with either ``data`` or ``error``
    """
    result: Dict[str, Any] = {
        "url": url,
        "mode": args.mode,
        "timestamp": datetime.now().isoformat(),
    }

    try:
        if args.mode == 'oembed':
            options = OEmbedOptions(maxwidth=args.maxwidth, maxheight=args.maxheight)
            result["data"] = service.get_oembed(url, options)
        elif args.mode == 'render':
            options = RenderOptions(
                width=args.width,
                height=args.height,
                autoplay=args.autoplay,
                controls=args.controls,
                theme=args.theme,
            )
            result["html"] = service.render_embed(url, options)
        else:
            result["data"] = service.extract_metadata(url).to_dict()

    except EmbedAgentError as e:
        logger.error(f"Error processing {url}: {e}", exc_info=args.verbose)
        result["error"] = str(e)
        result["status"] = e.status_code

    return result


def save_results(results: List[Dict[str, Any]], args: argparse.Namespace) -> str:
    """
    Save results to disk.

    Args:
        results: Result records
        args: Command-line arguments

    Returns:
        Path of the written file
    """
    os.makedirs(args.output, exist_ok=True)

    # Generate filename based on timestamp
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filename = os.path.join(args.output, f"embed_{args.mode}_{timestamp}.json")

    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(results, f, indent=2, ensure_ascii=False)

    logger.info(f"Results saved to {filename}")

    return filename


def serve(config: Dict[str, Any], host: Optional[str] = None, port: Optional[int] = None) -> None:
    """
    Run the HTTP API with uvicorn.

    Args:
        config: Application configuration
        host: Bind host override
        port: Bind port override
    """
    import uvicorn

    from embed_agent.api.app import create_app

    server_config = config.get('server', {})
    host = host or server_config.get('host', '0.0.0.0')
    port = port or server_config.get('port', 3001)

    logger.info(f"Embed API server running on {host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port, log_config=None)


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the script.
    """
    # Parse command-line arguments
    parser = setup_argparse()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        parser.error(str(e))

    setup_logging(config, args.verbose)

    if args.serve:
        serve(config, args.host, args.port)
        return

    # Get URLs to process
    urls = []

    if args.url:
        urls.append(args.url)

    if args.url_file:
        urls.extend(get_urls_from_file(args.url_file))

    if not urls:
        parser.print_help()
        sys.exit(1)

    service = EmbedService(config)

    results = []
    for url in tqdm(urls, desc=f"Running {args.mode}", unit="url", disable=len(urls) < 2):
        results.append(process_url(service, url, args))

    failures = sum(1 for result in results if "error" in result)
    logger.info(f"Processed {len(results)} URLs ({failures} failed)")

    # Save results
    save_results(results, args)


if __name__ == "__main__":
    main()
