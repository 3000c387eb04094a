"""Deploy the Artwork contract and publish its address to CI variables."""
