"""Generate sample originals for the image compression demo (see seed_jobs)."""
import os

from PIL import Image, ImageDraw

from config.settings import settings

directory = os.path.join(settings.MEDIA_FILE_ROOT, "demo", "object-1")
os.makedirs(directory, exist_ok=True)

img = Image.new("RGB", (3000, 2000), color=(41, 128, 185))
draw = ImageDraw.Draw(img)

# Draw a simple grid pattern so the compressed copies are visually comparable
for x in range(0, 3000, 100):
    draw.line([(x, 0), (x, 2000)], fill=(52, 152, 219), width=3)
for y in range(0, 2000, 100):
    draw.line([(0, y), (3000, y)], fill=(52, 152, 219), width=3)

draw.rectangle([750, 500, 2250, 1500], fill=(231, 76, 60), outline=(192, 57, 43), width=10)

img.save(os.path.join(directory, "sample-jpeg_origin.jpg"), "JPEG", quality=90)
img.save(os.path.join(directory, "sample-png_origin.png"), "PNG")
print(f"Created sample-jpeg_origin.jpg and sample-png_origin.png in {directory} (3000x2000)")

# object-2 reuses the same original
second = os.path.join(settings.MEDIA_FILE_ROOT, "demo", "object-2")
os.makedirs(second, exist_ok=True)
img.save(os.path.join(second, "sample-jpeg_origin.jpg"), "JPEG", quality=90)
