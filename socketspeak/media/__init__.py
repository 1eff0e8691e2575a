"""
The `media` package wraps the external image host (Cloudinary).

Contents
--------
- images
    * `upload_images` — batched, bounded-parallel upload of message images,
      tolerant to individual failures
    * `upload_profile_picture` — single upload for a profile picture
"""
