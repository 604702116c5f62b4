from blog import BlogSettings, Link, blog, ga

SITE = BlogSettings(
    title="Antoni",
    author="Antoni",
    avatar="./snoop.jpg",
    avatar_class="full",
    links=[
        Link(title="Email", url="mailto:antoni@quassum.com"),
        Link(title="GitHub", url="https://github.com/bring-shrubbery"),
    ],
    lang="en",
    middlewares=[ga("G-C0SCBZQ6ME")],
)

if __name__ == "__main__":
    blog(SITE)
